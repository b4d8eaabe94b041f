"""Serializers for the core app.

Contains serializers for users and roles, authentication, the audit log,
system settings and the payloads of the user administration actions.
Follows the Read/Write serializer pattern.
"""

from django.contrib.auth import authenticate

from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from neokids_backend.core.models import AuditLog, Role, SystemSetting, User


# -----------------------------------------------------------------------------
# Role / User
# -----------------------------------------------------------------------------


class RoleSerializer(serializers.ModelSerializer):
    """Read-only serializer for Role model."""

    class Meta:
        model = Role
        fields = ['id', 'name', 'label']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Read-only serializer for User model with nested role."""

    role = RoleSerializer(read_only=True)
    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'name',
            'first_name',
            'last_name',
            'is_active',
            'role',
            'date_joined',
            'last_login',
        ]
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


class RoleNameField(serializers.SlugRelatedField):
    """Accepts a role by its name ("admin", "attendant", "technician")."""

    def __init__(self, **kwargs):
        kwargs.setdefault('slug_field', 'name')
        kwargs.setdefault('queryset', Role.objects.all())
        super().__init__(**kwargs)


class UserRoleUpdateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    role = RoleNameField()


class UserDeleteSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()


class UserInviteSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = RoleNameField()

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value.lower()


class UserCreateSerializer(UserInviteSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    name = serializers.CharField(max_length=150)


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------


class LoginSerializer(serializers.Serializer):
    """Validates credentials and returns the user."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        username = attrs.get('username')
        password = attrs.get('password')

        if not username or not password:
            raise serializers.ValidationError('Username and password are required.')

        user = authenticate(username=username, password=password)

        if user is None:
            raise serializers.ValidationError('Invalid credentials.')

        if not user.is_active:
            raise serializers.ValidationError('User account is disabled.')

        attrs['user'] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=True)

    def validate_refresh(self, value):
        try:
            RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(f'Invalid or expired refresh token: {e}')
        return value


# -----------------------------------------------------------------------------
# AuditLog
# -----------------------------------------------------------------------------


class AuditLogSerializer(serializers.ModelSerializer):
    """Read-only serializer for AuditLog model."""

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'table_name',
            'record_id',
            'action',
            'old_data',
            'new_data',
            'user',
            'user_email',
            'role_name',
            'timestamp',
        ]
        read_only_fields = fields


# -----------------------------------------------------------------------------
# SystemSetting
# -----------------------------------------------------------------------------


class SystemSettingSerializer(serializers.ModelSerializer):
    updated_by_email = serializers.CharField(source='updated_by.email', read_only=True, default=None)

    class Meta:
        model = SystemSetting
        fields = [
            'key',
            'category',
            'value',
            'value_type',
            'options',
            'description',
            'updated_by_email',
            'updated_at',
        ]
        read_only_fields = fields


class SystemSettingUpdateSerializer(serializers.Serializer):
    """Only the value is editable; it must fit the setting's type."""

    value = serializers.JSONField()

    def validate_value(self, value):
        setting = self.context['setting']
        try:
            return setting.coerce(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))
