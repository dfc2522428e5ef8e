"""
Monthly salary / fee ledger endpoints.

The same views serve doctors, staff and patients; the route passes the
payee ``category`` as a keyword argument and the ledger service picks the
matching repository.  Reads are open to every authenticated user, the
monthly batch needs a finance role and ledger corrections an admin role.
"""
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from crm.permissions import IsAdminRole, IsFinanceRole
from crm.serializers.ledger import PeriodSerializer
from crm.services import ledger
from crm.services.audit import log_action
from crm.services.periods import validate_period
from crm.services.repositories import get_category

logger = logging.getLogger(__name__)


def _period_from_query(request):
    today = timezone.localdate()
    month = request.query_params.get('month') or today.month
    year = request.query_params.get('year') or today.year
    return validate_period(month, year)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def salary_list(request, category):
    """Payees with their balances for ``?month=&year=`` (defaults to today).

    Rows come from the saved ledger when the month has been saved and are
    computed on the fly otherwise; ``source`` tells which.
    """
    get_category(category)
    month, year = _period_from_query(request)
    statement = ledger.monthly_statement(category, month, year)
    return Response({'success': True, **statement})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def save_monthly_records(request, category):
    """Freeze balances for ``{month, year}`` and carry unpaid amounts forward."""
    get_category(category)
    s = PeriodSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    month, year = s.validated_data['month'], s.validated_data['year']
    result = ledger.run_monthly_carry_forward(category, month, year)
    log_action(user=request.user, action='ledger_save', object_type=category,
               detail={'month': month, 'year': year,
                       'recordsProcessed': result.records_processed,
                       'carryForwardUpdates': result.carry_forward_updates})
    return Response(result.as_payload())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def carry_forward(request, category, month, year):
    get_category(category)
    return Response(ledger.carry_forward_report(category, month, year))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_summary(request, category, month, year):
    get_category(category)
    return Response(ledger.monthly_summary(category, month, year))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def ledger_correction(request, category, pk):
    """Remove one saved ledger row so the month can be saved again."""
    config = get_category(category)
    record = get_object_or_404(config.ledger_model, pk=pk)
    detail = {'payee_id': record.payee_id, 'month': record.month, 'year': record.year,
              'net_balance': str(record.net_balance)}
    record.delete()
    ledger.invalidate_reports(category, detail['month'], detail['year'])
    log_action(user=request.user, action='ledger_delete', object_type=category, object_id=pk, detail=detail)
    logger.info('Ledger row %s (%s) deleted by %s', pk, category, request.user)
    return Response({'success': True, 'message': 'Ledger record deleted'})
