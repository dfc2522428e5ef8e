import bleach
from rest_framework import serializers

from crm.models import Doctor, Patient, Staff

PAYEE_FIELDS = ['id', 'name', 'email', 'phone', 'status', 'payment_mode', 'created_at', 'updated_at']


class PayeeSerializer(serializers.ModelSerializer):
    """Shared validation for doctors, staff and patients."""

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), tags=set(), strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v

    def validate_phone(self, v):
        return bleach.clean((v or '').strip(), tags=set(), strip=True)

    def _validate_amount(self, v):
        if v is not None and v < 0:
            raise serializers.ValidationError('Amount cannot be negative')
        return v


class DoctorSerializer(PayeeSerializer):
    class Meta:
        model = Doctor
        fields = PAYEE_FIELDS + ['specialization', 'salary', 'join_date']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_salary(self, v):
        return self._validate_amount(v)


class StaffSerializer(PayeeSerializer):
    class Meta:
        model = Staff
        fields = PAYEE_FIELDS + ['role', 'department', 'salary', 'join_date']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_salary(self, v):
        return self._validate_amount(v)


class PatientSerializer(PayeeSerializer):
    class Meta:
        model = Patient
        fields = PAYEE_FIELDS + ['monthly_fees', 'admission_date', 'guardian_name']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_monthly_fees(self, v):
        return self._validate_amount(v)

    def validate_guardian_name(self, v):
        return bleach.clean((v or '').strip(), tags=set(), strip=True)


PAYEE_SERIALIZERS = {
    'doctor': DoctorSerializer,
    'staff': StaffSerializer,
    'patient': PatientSerializer,
}


class PayeeListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['Active', 'Inactive'], required=False)
    q = serializers.CharField(max_length=64, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
