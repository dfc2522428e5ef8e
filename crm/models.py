"""
Database models for the clinic CRM backend.

Payees (doctors, staff and patients) owe or are owed a recurring monthly
amount.  Money movements are recorded as dated settlements and advances,
and once a month the balances are frozen into a per-payee ledger row that
carries any unpaid remainder into the following month.  The three payee
categories share abstract base classes so that every category gets the
same columns under its own table name.
"""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.db import models


ZERO = Decimal('0.00')


class User(AbstractUser):
    """Operator account with a coarse role.

    ``super`` and ``admin`` may correct ledgers and hard-delete records,
    ``accountant`` may move money, ``staff`` is read-only.
    """
    ROLE_CHOICES = [
        ('super', 'Super Administrator'),
        ('admin', 'Administrator'),
        ('accountant', 'Accountant'),
        ('staff', 'Staff'),
    ]
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default='staff')

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


# ---------------------------------------------------------------------------
# Payees
# ---------------------------------------------------------------------------

class Payee(models.Model):
    STATUS_ACTIVE = 'Active'
    STATUS_INACTIVE = 'Inactive'
    STATUS_CHOICES = ((STATUS_ACTIVE, 'Active'), (STATUS_INACTIVE, 'Inactive'))

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    payment_mode = models.CharField(max_length=50, default='Bank Transfer')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} (#{self.pk})"


class Doctor(Payee):
    specialization = models.CharField(max_length=255, blank=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    join_date = models.DateField(null=True, blank=True)

    class Meta(Payee.Meta):
        db_table = 'doctors'


class Staff(Payee):
    role = models.CharField(max_length=100, blank=True)
    department = models.CharField(max_length=100, blank=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    join_date = models.DateField(null=True, blank=True)

    class Meta(Payee.Meta):
        db_table = 'staff'
        verbose_name_plural = 'staff'


class Patient(Payee):
    """A resident patient billed a fixed monthly fee."""
    monthly_fees = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    admission_date = models.DateField(null=True, blank=True)
    guardian_name = models.CharField(max_length=255, blank=True)

    class Meta(Payee.Meta):
        db_table = 'patients'


# ---------------------------------------------------------------------------
# Money movements (append-only inputs to the monthly ledger)
# ---------------------------------------------------------------------------

class Settlement(models.Model):
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_date = models.DateField(db_index=True)
    payment_mode = models.CharField(max_length=50, default='Bank Transfer')
    type = models.CharField(max_length=50, default='salary')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['-payment_date', '-created_at']


class DoctorSalarySettlement(Settlement):
    payee = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='settlements', db_column='doctor_id')

    class Meta(Settlement.Meta):
        db_table = 'doctor_salary_settlements'


class StaffSalarySettlement(Settlement):
    payee = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='settlements', db_column='staff_id')

    class Meta(Settlement.Meta):
        db_table = 'staff_salary_settlements'


class PatientFeeSettlement(Settlement):
    payee = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='settlements', db_column='patient_id')

    class Meta(Settlement.Meta):
        db_table = 'patient_fee_settlements'


class Advance(models.Model):
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField(db_index=True)
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']


class DoctorAdvance(Advance):
    payee = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='advances', db_column='doctor_id')

    class Meta(Advance.Meta):
        db_table = 'doctor_advance'


class StaffAdvance(Advance):
    payee = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='advances', db_column='staff_id')

    class Meta(Advance.Meta):
        db_table = 'staff_advance'


class PatientAdvance(Advance):
    """Deposit or concession credited against a patient's monthly fee."""
    payee = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='advances', db_column='patient_id')

    class Meta(Advance.Meta):
        db_table = 'patient_advance'


# ---------------------------------------------------------------------------
# Monthly ledger
# ---------------------------------------------------------------------------

class MonthlyLedgerRecord(models.Model):
    """Frozen month-end balance of one payee.

    ``net_balance = base_amount + carry_forward_from_previous - total_paid
    - advance_amount`` and ``carry_forward_to_next = max(0, net_balance)``.
    A negative ``net_balance`` is kept for reporting.
    """
    STATUS_PENDING = 'Pending'
    STATUS_PAID = 'Paid'
    STATUS_CHOICES = ((STATUS_PENDING, 'Pending'), (STATUS_PAID, 'Paid'))

    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    base_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_paid = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    carry_forward_from_previous = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    carry_forward_to_next = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    net_balance = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return f"ledger p={self.payee_id} {self.month:02d}/{self.year} net={self.net_balance}"  # type: ignore[attr-defined]


class DoctorMonthlySalary(MonthlyLedgerRecord):
    payee = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='ledger', db_column='doctor_id')

    class Meta:
        db_table = 'doctor_monthly_salary'
        constraints = [
            models.UniqueConstraint(fields=['payee', 'month', 'year'], name='uniq_doctor_month_year'),
        ]
        indexes = [models.Index(fields=['year', 'month'], name='doctor_ledger_period_idx')]


class StaffMonthlySalary(MonthlyLedgerRecord):
    payee = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='ledger', db_column='staff_id')

    class Meta:
        db_table = 'staff_monthly_salary'
        constraints = [
            models.UniqueConstraint(fields=['payee', 'month', 'year'], name='uniq_staff_month_year'),
        ]
        indexes = [models.Index(fields=['year', 'month'], name='staff_ledger_period_idx')]


class PatientMonthlyFee(MonthlyLedgerRecord):
    payee = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='ledger', db_column='patient_id')

    class Meta:
        db_table = 'patient_monthly_fees'
        constraints = [
            models.UniqueConstraint(fields=['payee', 'month', 'year'], name='uniq_patient_month_year'),
        ]
        indexes = [models.Index(fields=['year', 'month'], name='patient_ledger_period_idx')]


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
