from django.contrib import admin

from neokids_backend.catalog.models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "category", "base_price", "operational_cost", "active")
    list_filter = ("category", "active")
    search_fields = ("code", "name")
    ordering = ("name",)
