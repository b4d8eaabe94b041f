from django.contrib import admin

from neokids_backend.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "cpf", "birth_date", "responsible_name", "phone", "created_at")
    search_fields = ("name", "cpf", "phone", "responsible_name")
    ordering = ("name",)
    list_per_page = 50
    readonly_fields = ("cpf", "created_by", "created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # CPF is only editable while creating.
        if obj is None:
            return ("created_by", "created_at", "updated_at")
        return self.readonly_fields

    def has_delete_permission(self, request, obj=None):
        return False
