from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from crm.permissions import IsFinanceOrReadOnly
from crm.serializers.ledger import AdvanceSerializer
from crm.services.audit import log_action
from crm.services.repositories import get_category


def _payee_or_404(config, payee_id):
    return get_object_or_404(config.payee_model, pk=payee_id)


@api_view(['GET', 'POST'])
@permission_classes([IsFinanceOrReadOnly])
def advances(request, category):
    """List every advance of a category, or record a new one."""
    config = get_category(category)
    if request.method == 'GET':
        qs = config.advance_model.objects.select_related('payee')
        return Response({'success': True, 'data': AdvanceSerializer(qs, many=True).data})

    s = AdvanceSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    payee = _payee_or_404(config, vd['payee_id'])
    advance = config.advance_model.objects.create(
        payee=payee, date=vd['date'], amount=vd['amount'], reason=vd['reason'],
    )
    log_action(user=request.user, action='advance_create', object_type=category, object_id=advance.id,
               detail={'payee_id': payee.pk, 'amount': str(advance.amount), 'date': advance.date.isoformat()})
    return Response({
        'success': True,
        'message': f'{config.label} advance created successfully',
        'data': AdvanceSerializer(advance).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsFinanceOrReadOnly])
def advance_detail(request, category, pk):
    config = get_category(category)
    advance = get_object_or_404(config.advance_model.objects.select_related('payee'), pk=pk)

    if request.method == 'GET':
        return Response({'success': True, 'data': AdvanceSerializer(advance).data})

    if request.method == 'DELETE':
        detail = {'payee_id': advance.payee_id, 'amount': str(advance.amount), 'date': advance.date.isoformat()}
        advance.delete()
        log_action(user=request.user, action='advance_delete', object_type=category, object_id=pk, detail=detail)
        return Response({'success': True, 'message': f'{config.label} advance deleted successfully'})

    s = AdvanceSerializer(advance, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    if 'payee_id' in vd:
        advance.payee = _payee_or_404(config, vd['payee_id'])
    for field in ('date', 'amount', 'reason'):
        if field in vd:
            setattr(advance, field, vd[field])
    advance.save()
    log_action(user=request.user, action='advance_update', object_type=category, object_id=pk,
               detail={'fields': sorted(vd)})
    return Response({'success': True, 'message': f'{config.label} advance updated successfully',
                     'data': AdvanceSerializer(advance).data})


@api_view(['GET'])
@permission_classes([IsFinanceOrReadOnly])
def payee_advances(request, category, payee_id):
    config = get_category(category)
    payee = _payee_or_404(config, payee_id)
    qs = config.advance_model.objects.select_related('payee').filter(payee=payee)
    return Response({'success': True, 'data': AdvanceSerializer(qs, many=True).data})
