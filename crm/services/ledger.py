"""
Monthly carry-forward ledger.

Every payee category uses the same rule: what is owed this month is the
base obligation plus whatever was left unpaid last month, minus the
payments and advances dated inside the month.  Positive remainders roll
into the next month.  ``compute_ledger`` is the single implementation of
that rule and is shared by the batch writer and the dashboard read model.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from crm.exceptions import LedgerBatchError, LedgerError
from crm.models import ZERO, MonthlyLedgerRecord
from crm.services.periods import previous_period, validate_period
from crm.services.repositories import OrmPayeeRepository, PayeeRepository

logger = logging.getLogger(__name__)

STATUS_PENDING = MonthlyLedgerRecord.STATUS_PENDING
STATUS_PAID = MonthlyLedgerRecord.STATUS_PAID
STATUS_OVERPAID = 'Overpaid'


@dataclass(frozen=True)
class LedgerFigures:
    net_balance: Decimal
    carry_forward_to_next: Decimal
    status: str


@dataclass(frozen=True)
class BatchResult:
    category: str
    month: int
    year: int
    records_processed: int
    carry_forward_updates: int

    def as_payload(self) -> dict:
        return {
            'success': True,
            'message': f'Monthly records saved successfully for {self.month}/{self.year}',
            'recordsProcessed': self.records_processed,
            'carryForwardUpdates': self.carry_forward_updates,
            'month': self.month,
            'year': self.year,
        }


def _money(value) -> Decimal:
    if value is None or value == '':
        return ZERO
    return Decimal(str(value)).quantize(Decimal('0.01'))


def compute_ledger(base, carry_forward_prev, paid, advance) -> LedgerFigures:
    net = _money(base) + _money(carry_forward_prev) - _money(paid) - _money(advance)
    carry = net if net > 0 else ZERO
    return LedgerFigures(
        net_balance=net,
        carry_forward_to_next=carry,
        status=STATUS_PAID if net <= 0 else STATUS_PENDING,
    )


def display_status(net_balance) -> str:
    """Status label for listings; only the read side distinguishes overpayment."""
    net = _money(net_balance)
    if net > 0:
        return STATUS_PENDING
    if net == 0:
        return STATUS_PAID
    return STATUS_OVERPAID


def _repository(category: str, repository: Optional[PayeeRepository]) -> PayeeRepository:
    return repository if repository is not None else OrmPayeeRepository.for_category(category)


def _inputs(repo: PayeeRepository, payee, month: int, year: int) -> dict:
    prev_month, prev_year = previous_period(month, year)
    return {
        'base_amount': _money(repo.obligation_of(payee)),
        'carry_forward_from_previous': _money(repo.get_prior_carry_forward(payee.pk, prev_month, prev_year)),
        'total_paid': _money(repo.sum_payments(payee.pk, month, year)),
        'advance_amount': _money(repo.sum_advances(payee.pk, month, year)),
    }


def _figures_for(inputs: dict) -> LedgerFigures:
    return compute_ledger(
        inputs['base_amount'],
        inputs['carry_forward_from_previous'],
        inputs['total_paid'],
        inputs['advance_amount'],
    )


# ---------------------------------------------------------------------------
# Batch writer
# ---------------------------------------------------------------------------

def run_monthly_carry_forward(category: str, month, year, *, repository: Optional[PayeeRepository] = None) -> BatchResult:
    """Recompute and persist every eligible payee's ledger row for one month.

    The batch is all-or-nothing: any failure rolls back every row written so
    far and is re-raised as :class:`LedgerBatchError`.  Re-running with the
    same inputs rewrites identical rows.
    """
    month, year = validate_period(month, year)
    repo = _repository(category, repository)
    logger.info('Saving %s monthly records for %s/%s', category, month, year)

    processed = 0
    carried = 0
    try:
        with transaction.atomic():
            for payee in repo.list_eligible(month, year):
                inputs = _inputs(repo, payee, month, year)
                figures = _figures_for(inputs)
                repo.upsert_ledger(payee.pk, month, year, {
                    **inputs,
                    'net_balance': figures.net_balance,
                    'carry_forward_to_next': figures.carry_forward_to_next,
                    'status': figures.status,
                })
                processed += 1
                if figures.carry_forward_to_next > 0:
                    carried += 1
                    logger.debug('%s %s: %s carries forward to next month', category, payee.pk, figures.net_balance)
    except LedgerError:
        raise
    except Exception as exc:
        logger.exception('Monthly %s records for %s/%s rolled back', category, month, year)
        raise LedgerBatchError(f'Failed to save monthly records for {month}/{year}', cause=exc) from exc

    invalidate_reports(category, month, year)
    logger.info('Processed %s %s records for %s/%s, %s carry forward', processed, category, month, year, carried)
    return BatchResult(category, month, year, processed, carried)


# ---------------------------------------------------------------------------
# Read side
# ---------------------------------------------------------------------------

def _statement_row(repo: PayeeRepository, payee, month: int, year: int) -> dict:
    record = repo.get_ledger(payee.pk, month, year)
    if record is not None:
        values = {
            'base_amount': record.base_amount,
            'carry_forward_from_previous': record.carry_forward_from_previous,
            'total_paid': record.total_paid,
            'advance_amount': record.advance_amount,
        }
        figures = LedgerFigures(record.net_balance, record.carry_forward_to_next, record.status)
        source = 'ledger'
    else:
        values = _inputs(repo, payee, month, year)
        figures = _figures_for(values)
        source = 'live'
    return {
        'id': payee.pk,
        'name': payee.name,
        'phone': payee.phone,
        'email': payee.email,
        'payment_mode': payee.payment_mode,
        'join_date': repo.join_date_of(payee),
        **values,
        'net_balance': figures.net_balance,
        'carry_forward_to_next': figures.carry_forward_to_next,
        'status': display_status(figures.net_balance),
        'source': source,
    }


def monthly_statement(category: str, month, year, *, repository: Optional[PayeeRepository] = None) -> dict:
    """Per-payee balances for a month, stored where saved and live otherwise."""
    month, year = validate_period(month, year)
    repo = _repository(category, repository)
    rows = [_statement_row(repo, payee, month, year) for payee in repo.list_eligible(month, year)]
    summary = {
        'total_payees': len(rows),
        'total_base': sum((r['base_amount'] for r in rows), ZERO),
        'total_paid': sum((r['total_paid'] for r in rows), ZERO),
        'total_advance': sum((r['advance_amount'] for r in rows), ZERO),
        'total_pending': sum((r['carry_forward_to_next'] for r in rows), ZERO),
        'saved_records': sum(1 for r in rows if r['source'] == 'ledger'),
        'month': month,
        'year': year,
    }
    return {'data': rows, 'summary': summary}


def _version_key(category: str) -> str:
    return f'ledger:cf:{category}:version'


def _report_version(category: str) -> int:
    return cache.get_or_set(_version_key(category), 1, None)


def report_cache_key(category: str, month: int, year: int) -> str:
    return f'ledger:cf:{category}:v{_report_version(category)}:{year}:{month}'


def invalidate_reports(category: str, month: int, year: int) -> None:
    cache.delete(report_cache_key(category, month, year))


def invalidate_category_reports(category: str) -> None:
    """Drop every cached report of ``category`` by bumping its key version."""
    key = _version_key(category)
    try:
        cache.incr(key)
    except ValueError:
        cache.set(key, 2, None)


def carry_forward_report(category: str, month, year, *, use_cache: bool = True) -> dict:
    """Active payees whose saved month carries a positive balance forward."""
    month, year = validate_period(month, year)
    key = report_cache_key(category, month, year)
    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            return cached
    repo = OrmPayeeRepository.for_category(category)
    records = (
        repo.ledger_for_period(month, year)
        .filter(payee__status='Active', carry_forward_to_next__gt=0)
        .order_by('payee__name')
    )
    data = [{
        'id': r.payee_id,
        'name': r.payee.name,
        'carry_forward_amount': r.carry_forward_to_next,
        'net_balance': r.net_balance,
        'monthly_status': r.status,
    } for r in records]
    payload = {
        'success': True,
        'data': data,
        'totalCarryForward': sum((d['carry_forward_amount'] for d in data), ZERO),
        'month': month,
        'year': year,
    }
    cache.set(key, payload, getattr(settings, 'LEDGER_REPORT_CACHE_SECONDS', 300))
    return payload


def monthly_summary(category: str, month, year) -> dict:
    """Saved ledger rows for a month with column totals."""
    month, year = validate_period(month, year)
    repo = OrmPayeeRepository.for_category(category)
    records = list(repo.ledger_for_period(month, year).order_by('-net_balance', 'payee__name'))
    data = [{
        'id': r.pk,
        'payee_id': r.payee_id,
        'name': r.payee.name,
        'base_amount': r.base_amount,
        'total_paid': r.total_paid,
        'advance_amount': r.advance_amount,
        'carry_forward_from_previous': r.carry_forward_from_previous,
        'carry_forward_to_next': r.carry_forward_to_next,
        'net_balance': r.net_balance,
        'status': r.status,
    } for r in records]

    def total(field):
        return sum((getattr(r, field) for r in records), ZERO)

    summary = {
        'total_payees': len(records),
        'total_base': total('base_amount'),
        'total_paid': total('total_paid'),
        'total_advance': total('advance_amount'),
        'total_pending': total('net_balance'),
        'carry_forward_from_previous': total('carry_forward_from_previous'),
        'carry_forward_to_next': total('carry_forward_to_next'),
    }
    return {'success': True, 'data': data, 'summary': summary, 'month': month, 'year': year}
