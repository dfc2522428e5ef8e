from decimal import Decimal

import bleach
from rest_framework import serializers

from crm.services.periods import MAX_YEAR, MIN_YEAR


class PeriodSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=MIN_YEAR, max_value=MAX_YEAR)


class PaymentCreateSerializer(serializers.Serializer):
    payeeId = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    paymentDate = serializers.DateField()
    paymentMode = serializers.CharField(max_length=50, required=False, default='Bank Transfer')
    type = serializers.CharField(max_length=50, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_notes(self, v):
        return bleach.clean((v or '').strip(), tags=set(), strip=True)


class SettlementSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    payee_id = serializers.IntegerField(read_only=True)
    payee_name = serializers.CharField(source='payee.name', read_only=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    payment_date = serializers.DateField(read_only=True)
    payment_mode = serializers.CharField(read_only=True)
    type = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class AdvanceSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    payeeId = serializers.IntegerField(source='payee_id', min_value=1)
    payeeName = serializers.CharField(source='payee.name', read_only=True)
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    created_at = serializers.DateTimeField(read_only=True)

    def validate_reason(self, v):
        return bleach.clean((v or '').strip(), tags=set(), strip=True)
