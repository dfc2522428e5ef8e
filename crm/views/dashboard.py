"""
Administrative dashboard endpoint.

Summarises every payee category for one month using the same read model
as the salary listings, so the figures match what the list pages show.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole
from ..services import ledger
from ..services.periods import validate_period
from ..services.repositories import CATEGORIES


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_dashboard(request):
    """Return per-category totals for ``?month=&year=`` (defaults to today)."""
    today = timezone.localdate()
    month, year = validate_period(
        request.query_params.get('month') or today.month,
        request.query_params.get('year') or today.year,
    )
    categories = {}
    for key in CATEGORIES:
        summary = ledger.monthly_statement(key, month, year)['summary']
        categories[key] = {
            'activePayees': summary['total_payees'],
            'totalBase': summary['total_base'],
            'totalPaid': summary['total_paid'],
            'totalAdvance': summary['total_advance'],
            'totalPending': summary['total_pending'],
            'savedRecords': summary['saved_records'],
        }
    return Response({'success': True, 'month': month, 'year': year, 'categories': categories})
