"""
Salary / fee settlement endpoints.

Payments are inputs to the monthly ledger only; recording, editing or deleting
one never edits a saved ledger row.  Saving the month again picks the change up.
"""
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from crm.permissions import IsFinanceRole
from crm.serializers.ledger import PaymentCreateSerializer, SettlementSerializer
from crm.services.audit import log_action
from crm.services.repositories import get_category

logger = logging.getLogger(__name__)

DEFAULT_TYPE = {'doctor': 'salary', 'staff': 'salary', 'patient': 'fees'}


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_history(request, category, payee_id):
    config = get_category(category)
    payee = get_object_or_404(config.payee_model, pk=payee_id)
    qs = config.settlement_model.objects.select_related('payee').filter(payee=payee)
    return Response({'success': True, 'data': SettlementSerializer(qs, many=True).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def record_payment(request, category):
    config = get_category(category)
    s = PaymentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    payee = config.payee_model.objects.filter(pk=vd['payeeId']).first()
    if not payee:
        return Response({'success': False, 'message': f'{config.label} not found', 'error': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    payment = config.settlement_model.objects.create(
        payee=payee,
        amount=vd['amount'],
        payment_date=vd['paymentDate'],
        payment_mode=vd['paymentMode'],
        type=vd.get('type') or DEFAULT_TYPE[category],
        notes=vd['notes'],
    )
    log_action(user=request.user, action='payment_create', object_type=category, object_id=payment.id,
               detail={'payee_id': payee.pk, 'amount': str(payment.amount),
                       'payment_date': payment.payment_date.isoformat()})
    logger.info('Recorded %s payment %s of %s for %s', category, payment.id, payment.amount, payee.pk)
    return Response({
        'success': True,
        'message': 'Payment recorded successfully',
        'data': SettlementSerializer(payment).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def payment_detail(request, category, pk):
    config = get_category(category)
    payment = config.settlement_model.objects.select_related('payee').filter(pk=pk).first()
    if not payment:
        return Response({'success': False, 'message': 'Payment record not found', 'error': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'DELETE':
        detail = {'payee_id': payment.payee_id, 'amount': str(payment.amount),
                  'payment_date': payment.payment_date.isoformat()}
        payment.delete()
        log_action(user=request.user, action='payment_delete', object_type=category, object_id=pk, detail=detail)
        return Response({'success': True, 'message': 'Payment deleted successfully'})

    s = PaymentCreateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    if 'payeeId' in vd:
        payee = config.payee_model.objects.filter(pk=vd['payeeId']).first()
        if not payee:
            return Response({'success': False, 'message': f'{config.label} not found', 'error': 'not_found'}, status=status.HTTP_404_NOT_FOUND)
        payment.payee = payee
    for key, field in (('amount', 'amount'), ('paymentDate', 'payment_date'),
                       ('paymentMode', 'payment_mode'), ('type', 'type'), ('notes', 'notes')):
        if key in vd:
            setattr(payment, field, vd[key])
    payment.save()
    log_action(user=request.user, action='payment_update', object_type=category, object_id=pk,
               detail={'fields': sorted(vd)})
    return Response({
        'success': True,
        'message': 'Payment updated successfully',
        'data': SettlementSerializer(payment).data,
    })
