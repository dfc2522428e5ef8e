"""
Django admin registrations for the crm models.

Payees, money movements and ledger rows are exposed read/write so that
superusers can inspect data via ``/admin/``.  Ledger rows are normally
written only by the monthly batch.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
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
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_active', 'is_staff', 'is_superuser')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'first_name', 'last_name', 'email')


class PayeeAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'phone', 'status', 'payment_mode')
    list_filter = ('status',)
    search_fields = ('name', 'email', 'phone')


@admin.register(Doctor)
class DoctorAdmin(PayeeAdmin):
    list_display = PayeeAdmin.list_display + ('specialization', 'salary', 'join_date')


@admin.register(Staff)
class StaffAdmin(PayeeAdmin):
    list_display = PayeeAdmin.list_display + ('role', 'department', 'salary', 'join_date')


@admin.register(Patient)
class PatientAdmin(PayeeAdmin):
    list_display = PayeeAdmin.list_display + ('monthly_fees', 'admission_date')


@admin.register(DoctorSalarySettlement, StaffSalarySettlement, PatientFeeSettlement)
class SettlementAdmin(admin.ModelAdmin):
    list_display = ('id', 'payee', 'amount', 'payment_date', 'payment_mode', 'type')
    list_filter = ('payment_mode', 'type')
    search_fields = ('payee__name',)
    date_hierarchy = 'payment_date'


@admin.register(DoctorAdvance, StaffAdvance, PatientAdvance)
class AdvanceAdmin(admin.ModelAdmin):
    list_display = ('id', 'payee', 'amount', 'date', 'reason')
    search_fields = ('payee__name', 'reason')
    date_hierarchy = 'date'


@admin.register(DoctorMonthlySalary, StaffMonthlySalary, PatientMonthlyFee)
class LedgerAdmin(admin.ModelAdmin):
    list_display = ('id', 'payee', 'month', 'year', 'base_amount', 'total_paid', 'advance_amount',
                    'carry_forward_from_previous', 'net_balance', 'carry_forward_to_next', 'status')
    list_filter = ('year', 'month', 'status')
    search_fields = ('payee__name',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('user__username',)
