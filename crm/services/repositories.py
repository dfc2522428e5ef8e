"""
Data access for the monthly carry-forward ledger.

Doctors, staff and patients differ only in which tables hold their rows and
which column carries the monthly obligation.  :class:`CategoryConfig`
captures those differences and :class:`OrmPayeeRepository` implements the
ledger's data needs on top of any one configuration, so the arithmetic in
``crm.services.ledger`` never branches on category.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from django.db import models
from django.db.models import Q, Sum

from crm.exceptions import UnknownCategory
from crm.models import (
    ZERO,
    Doctor,
    DoctorAdvance,
    DoctorMonthlySalary,
    DoctorSalarySettlement,
    Patient,
    PatientAdvance,
    PatientFeeSettlement,
    PatientMonthlyFee,
    Staff,
    StaffAdvance,
    StaffMonthlySalary,
    StaffSalarySettlement,
)
from crm.services.periods import last_day_of_month, period_bounds


@dataclass(frozen=True)
class CategoryConfig:
    key: str
    label: str
    payee_model: type[models.Model]
    settlement_model: type[models.Model]
    advance_model: type[models.Model]
    ledger_model: type[models.Model]
    obligation_field: str
    join_field: str


CATEGORIES: dict[str, CategoryConfig] = {
    'doctor': CategoryConfig(
        key='doctor',
        label='Doctor',
        payee_model=Doctor,
        settlement_model=DoctorSalarySettlement,
        advance_model=DoctorAdvance,
        ledger_model=DoctorMonthlySalary,
        obligation_field='salary',
        join_field='join_date',
    ),
    'staff': CategoryConfig(
        key='staff',
        label='Staff',
        payee_model=Staff,
        settlement_model=StaffSalarySettlement,
        advance_model=StaffAdvance,
        ledger_model=StaffMonthlySalary,
        obligation_field='salary',
        join_field='join_date',
    ),
    'patient': CategoryConfig(
        key='patient',
        label='Patient',
        payee_model=Patient,
        settlement_model=PatientFeeSettlement,
        advance_model=PatientAdvance,
        ledger_model=PatientMonthlyFee,
        obligation_field='monthly_fees',
        join_field='admission_date',
    ),
}


def get_category(key: str) -> CategoryConfig:
    try:
        return CATEGORIES[key]
    except KeyError:
        raise UnknownCategory(f'Unknown payee category: {key}')


class PayeeRepository(Protocol):
    """What the ledger service needs from storage for one payee category."""

    def list_eligible(self, month: int, year: int) -> Iterable[models.Model]: ...

    def obligation_of(self, payee: models.Model) -> Decimal: ...

    def join_date_of(self, payee: models.Model) -> Optional[date]: ...

    def sum_payments(self, payee_id: int, month: int, year: int) -> Decimal: ...

    def sum_advances(self, payee_id: int, month: int, year: int) -> Decimal: ...

    def get_prior_carry_forward(self, payee_id: int, month: int, year: int) -> Decimal: ...

    def get_ledger(self, payee_id: int, month: int, year: int) -> Optional[models.Model]: ...

    def upsert_ledger(self, payee_id: int, month: int, year: int, values: dict) -> tuple[models.Model, bool]: ...


class OrmPayeeRepository:
    """Django ORM implementation of :class:`PayeeRepository`."""

    def __init__(self, config: CategoryConfig):
        self.config = config

    @classmethod
    def for_category(cls, key: str) -> 'OrmPayeeRepository':
        return cls(get_category(key))

    # -- payees -------------------------------------------------------------

    def list_eligible(self, month: int, year: int):
        """Active payees whose join date is unset or not after the month's last day."""
        join = self.config.join_field
        cutoff = last_day_of_month(month, year)
        return (
            self.config.payee_model.objects
            .filter(status='Active')
            .filter(Q(**{f'{join}__isnull': True}) | Q(**{f'{join}__lte': cutoff}))
            .order_by('id')
        )

    def obligation_of(self, payee) -> Decimal:
        return getattr(payee, self.config.obligation_field) or ZERO

    def join_date_of(self, payee) -> Optional[date]:
        return getattr(payee, self.config.join_field, None)

    # -- aggregates ---------------------------------------------------------

    def _sum(self, model, date_field: str, payee_id: int, month: int, year: int) -> Decimal:
        start, end = period_bounds(month, year)
        total = (
            model.objects
            .filter(payee_id=payee_id, **{f'{date_field}__range': (start, end)})
            .aggregate(total=Sum('amount'))['total']
        )
        return total if total is not None else ZERO

    def sum_payments(self, payee_id: int, month: int, year: int) -> Decimal:
        return self._sum(self.config.settlement_model, 'payment_date', payee_id, month, year)

    def sum_advances(self, payee_id: int, month: int, year: int) -> Decimal:
        return self._sum(self.config.advance_model, 'date', payee_id, month, year)

    # -- ledger -------------------------------------------------------------

    def get_ledger(self, payee_id: int, month: int, year: int):
        return self.config.ledger_model.objects.filter(payee_id=payee_id, month=month, year=year).first()

    def get_prior_carry_forward(self, payee_id: int, month: int, year: int) -> Decimal:
        """``carry_forward_to_next`` stored for (payee, month, year), or zero."""
        value = (
            self.config.ledger_model.objects
            .filter(payee_id=payee_id, month=month, year=year)
            .values_list('carry_forward_to_next', flat=True)
            .first()
        )
        return value if value is not None else ZERO

    def upsert_ledger(self, payee_id: int, month: int, year: int, values: dict):
        return self.config.ledger_model.objects.update_or_create(
            payee_id=payee_id, month=month, year=year, defaults=values,
        )

    def ledger_for_period(self, month: int, year: int):
        return self.config.ledger_model.objects.select_related('payee').filter(month=month, year=year)
