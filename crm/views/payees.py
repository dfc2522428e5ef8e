"""
Doctor, staff and patient records.

One pair of views serves all three payee tables; the route supplies the
``category``.  Deleting a payee marks it ``Inactive`` so its ledger history
stays intact; ``?hard=true`` removes the row and is limited to admins.
"""
from __future__ import annotations

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from crm.permissions import IsFinanceOrReadOnly, is_admin
from crm.serializers.payees import PAYEE_SERIALIZERS, PayeeListQuerySerializer
from crm.services import ledger
from crm.services.audit import log_action
from crm.services.repositories import get_category

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsFinanceOrReadOnly])
def payees(request, category):
    """List payees of a category or create one.

    Query params:
      - status: Active|Inactive
      - q: name / email / phone contains
      - page, pageSize: pagination (optional)
    """
    config = get_category(category)
    serializer_class = PAYEE_SERIALIZERS[category]

    if request.method == 'POST':
        s = serializer_class(data=request.data)
        s.is_valid(raise_exception=True)
        payee = s.save()
        log_action(user=request.user, action='payee_create', object_type=category, object_id=payee.pk,
                   detail={'name': payee.name})
        return Response({
            'success': True,
            'message': f'{config.label} created successfully',
            'data': serializer_class(payee).data,
        }, status=status.HTTP_201_CREATED)

    qs_params = PayeeListQuerySerializer(data=request.query_params)
    qs_params.is_valid(raise_exception=True)
    params = qs_params.validated_data

    qs = config.payee_model.objects.all()
    if params.get('status'):
        qs = qs.filter(status=params['status'])
    q = (params.get('q') or '').strip()
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(email__icontains=q) | Q(phone__icontains=q))

    total = qs.count()
    page = params.get('page')
    page_size = params.get('pageSize')
    if page and page_size:
        start = (page - 1) * page_size
        qs = qs[start:start + page_size]

    return Response({
        'success': True,
        'data': serializer_class(qs, many=True).data,
        'pagination': {'total': total, 'page': page or 1, 'pageSize': page_size or total},
    })


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsFinanceOrReadOnly])
def payee_detail(request, category, pk):
    config = get_category(category)
    serializer_class = PAYEE_SERIALIZERS[category]
    payee = get_object_or_404(config.payee_model, pk=pk)

    if request.method == 'GET':
        return Response({'success': True, 'data': serializer_class(payee).data})

    if request.method == 'PUT':
        s = serializer_class(payee, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        ledger.invalidate_category_reports(category)
        log_action(user=request.user, action='payee_update', object_type=category, object_id=pk,
                   detail={'fields': sorted(s.validated_data)})
        return Response({'success': True, 'message': f'{config.label} updated successfully', 'data': s.data})

    hard = (request.query_params.get('hard') or '').lower() in ('1', 'true', 'yes')
    if hard:
        if not is_admin(request.user):
            return Response({'success': False, 'message': 'Only administrators can permanently delete records',
                             'error': 'forbidden'},
                            status=status.HTTP_403_FORBIDDEN)
        payee.delete()
        ledger.invalidate_category_reports(category)
        log_action(user=request.user, action='payee_delete', object_type=category, object_id=pk,
                   detail={'hard': True, 'name': payee.name})
        logger.warning('%s %s permanently deleted by %s', config.label, pk, request.user)
        return Response({'success': True, 'message': f'{config.label} deleted successfully'})

    payee.status = config.payee_model.STATUS_INACTIVE
    payee.save(update_fields=['status', 'updated_at'])
    ledger.invalidate_category_reports(category)
    log_action(user=request.user, action='payee_delete', object_type=category, object_id=pk,
               detail={'hard': False})
    return Response({'success': True, 'message': f'{config.label} marked inactive'})
