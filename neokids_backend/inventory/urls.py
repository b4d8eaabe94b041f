"""Inventory URLs.

Prefix: /api/inventory/
Routes:
    GET/POST          /api/inventory/items/        - List (?low_stock=1) / create
    GET/PATCH/DELETE  /api/inventory/items/<pk>/   - Retrieve / update / delete
    GET/POST          /api/inventory/movements/    - List (?item=) / record
"""

from django.urls import path

from neokids_backend.inventory.views import (
    InventoryItemDetailView,
    InventoryItemListCreateView,
    StockMovementListCreateView,
)

app_name = 'inventory'

urlpatterns = [
    path('inventory/items/', InventoryItemListCreateView.as_view(), name='items'),
    path('inventory/items/<int:pk>/', InventoryItemDetailView.as_view(), name='item_detail'),
    path('inventory/movements/', StockMovementListCreateView.as_view(), name='movements'),
]
