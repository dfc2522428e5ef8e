from django.contrib.auth import get_user_model
from rest_framework import serializers

class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(max_length=150)
    name = serializers.CharField(source='first_name', max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=['admin', 'accountant', 'staff'], default='staff')
    password = serializers.CharField(write_only=True, min_length=8)
    is_active = serializers.BooleanField(read_only=True)

    def validate_username(self, v):
        v = (v or '').strip()
        if get_user_model().objects.filter(username=v).exists():
            raise serializers.ValidationError('Username already exists')
        return v


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['super', 'admin', 'accountant', 'staff'])
