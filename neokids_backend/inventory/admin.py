from django.contrib import admin

from neokids_backend.inventory.models import InventoryItem, StockMovement


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "category", "quantity", "unit", "alert_level", "expiration_date")
    list_filter = ("category",)
    search_fields = ("code", "name", "supplier")
    readonly_fields = ("quantity", "last_updated_by", "created_at", "updated_at")


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("created_at", "item", "movement_type", "quantity", "quantity_after", "user")
    list_filter = ("movement_type",)
    search_fields = ("item__name", "item__code", "reason")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
