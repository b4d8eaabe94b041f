from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings


class Role(models.Model):
    """User roles for RBAC (Role-Based Access Control).

    Standard roles: admin, attendant, technician
    """

    name = models.CharField(max_length=64, unique=True, db_index=True)
    label = models.CharField(max_length=128)

    class Meta:
        db_table = 'core_role'
        ordering = ['name']
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self) -> str:
        return self.label


class User(AbstractUser):
    """Clinic staff account.

    Extends Django's AbstractUser with:
    - role: ForeignKey to Role for RBAC
    - email: made unique (the SPA logs in with it); accounts without one
      store NULL so several of them can coexist
    """

    email = models.EmailField('email address', blank=True, null=True, unique=True)
    role = models.ForeignKey(
        Role,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='users',
    )

    class Meta:
        db_table = 'core_user'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def save(self, *args, **kwargs):
        if not self.email:
            self.email = None
        super().save(*args, **kwargs)

    @property
    def role_name(self):
        return self.role.name if self.role_id else None


class AuditLogWriteOnceError(Exception):
    """Raised on any attempt to change or remove an audit entry."""


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AuditLogWriteOnceError('Audit log entries cannot be updated.')

    def delete(self):
        raise AuditLogWriteOnceError('Audit log entries cannot be deleted.')


class AuditLog(models.Model):
    """Append-only record of every data change.

    record_id is a string so entries can point at rows of any table,
    including user accounts.
    """

    ACTION_INSERT = 'INSERT'
    ACTION_UPDATE = 'UPDATE'
    ACTION_DELETE = 'DELETE'
    ACTION_CHOICES = [
        (ACTION_INSERT, 'Insert'),
        (ACTION_UPDATE, 'Update'),
        (ACTION_DELETE, 'Delete'),
    ]

    table_name = models.CharField(max_length=100, db_index=True)
    record_id = models.CharField(max_length=64, db_index=True)
    action = models.CharField(max_length=10, choices=ACTION_CHOICES, db_index=True)
    old_data = models.JSONField(null=True, blank=True)
    new_data = models.JSONField(null=True, blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    user_email = models.CharField(max_length=254, blank=True, default='')
    role_name = models.CharField(max_length=50, blank=True, default='', db_index=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = 'core_auditlog'
        ordering = ['-timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['table_name', 'timestamp'], name='core_audit_table_ts_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.timestamp} {self.action} {self.table_name}#{self.record_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise AuditLogWriteOnceError('Audit log entries cannot be updated.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AuditLogWriteOnceError('Audit log entries cannot be deleted.')


class SystemSetting(models.Model):
    """Admin-editable runtime setting, one row per key."""

    TYPE_TEXT = 'text'
    TYPE_NUMBER = 'number'
    TYPE_BOOLEAN = 'boolean'
    TYPE_SELECT = 'select'
    VALUE_TYPE_CHOICES = [
        (TYPE_TEXT, 'Text'),
        (TYPE_NUMBER, 'Number'),
        (TYPE_BOOLEAN, 'Boolean'),
        (TYPE_SELECT, 'Select'),
    ]

    key = models.CharField(max_length=100, unique=True)
    category = models.CharField(max_length=50, default='general', db_index=True)
    value = models.JSONField(null=True, blank=True)
    value_type = models.CharField(max_length=10, choices=VALUE_TYPE_CHOICES, default=TYPE_TEXT)
    options = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True, default='')
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'core_systemsetting'
        ordering = ['category', 'key']
        verbose_name = 'System Setting'
        verbose_name_plural = 'System Settings'

    def __str__(self) -> str:
        return f"{self.key}: {self.value!r}"

    @classmethod
    def get_value(cls, key, default=None):
        """Return the stored value for ``key`` or ``default`` if it is unset."""
        try:
            return cls.objects.get(key=key).value
        except cls.DoesNotExist:
            return default

    def coerce(self, value):
        """Validate ``value`` against this setting's type.

        Returns the normalized value; raises ValueError when it does not fit.
        """
        if self.value_type == self.TYPE_BOOLEAN:
            if isinstance(value, bool):
                return value
            raise ValueError('Expected a boolean.')

        if self.value_type == self.TYPE_NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError('Expected a number.')
            return value

        if self.value_type == self.TYPE_SELECT:
            if value not in (self.options or []):
                raise ValueError(f"Expected one of: {', '.join(map(str, self.options or []))}.")
            return value

        if not isinstance(value, str):
            raise ValueError('Expected text.')
        return value
