from django.contrib import admin

from neokids_backend.appointments.models import Appointment, AppointmentService, ExamResult


class AppointmentServiceInline(admin.TabularInline):
    model = AppointmentService
    extra = 0
    fields = ("service", "result_data", "notes")
    raw_id_fields = ("service",)


class ExamResultInline(admin.TabularInline):
    model = ExamResult
    extra = 0
    fields = ("service", "status", "result_data", "issued_at", "updated_by")
    readonly_fields = ("issued_at", "updated_by")
    raw_id_fields = ("service",)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "appointment_date", "status", "payment_method", "insurance_type")
    list_filter = ("status", "payment_method", "insurance_type")
    search_fields = ("patient__name", "patient__cpf")
    date_hierarchy = "appointment_date"
    raw_id_fields = ("patient",)
    inlines = [AppointmentServiceInline, ExamResultInline]


@admin.register(ExamResult)
class ExamResultAdmin(admin.ModelAdmin):
    list_display = ("id", "appointment", "service", "patient", "status", "issued_at")
    list_filter = ("status",)
    search_fields = ("patient__name", "service__code")
    raw_id_fields = ("appointment", "service", "patient")
    readonly_fields = ("created_at", "updated_at", "created_by", "updated_by")
