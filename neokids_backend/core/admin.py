from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, Role, SystemSetting, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "label")
    search_fields = ("name", "label")
    ordering = ("name",)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("username", "email", "first_name", "last_name", "role", "is_active")
    list_filter = ("role", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("username",)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ("Perfil", {"fields": ("role",)}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("username", "password1", "password2", "email", "role", "first_name", "last_name"),
        }),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only: audit entries are write-once."""

    list_display = ("id", "timestamp", "user_email", "role_name", "action", "table_name", "record_id")
    list_filter = ("action", "table_name", "role_name")
    search_fields = ("user_email", "table_name", "record_id")
    ordering = ("-timestamp", "-id")
    date_hierarchy = "timestamp"
    readonly_fields = (
        "table_name", "record_id", "action", "old_data", "new_data",
        "user", "user_email", "role_name", "timestamp",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "category", "value", "value_type", "updated_at")
    list_filter = ("category", "value_type")
    search_fields = ("key", "description")
    readonly_fields = ("updated_by", "updated_at")
