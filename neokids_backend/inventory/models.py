from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class InventoryItem(models.Model):
    """A consumable kept in stock (tubes, reagents, gloves, ...).

    ``quantity`` only changes through StockMovement rows once the item
    exists.
    """

    name = models.CharField(max_length=120)
    code = models.CharField(max_length=30, unique=True, null=True, blank=True)
    category = models.CharField(max_length=80, blank=True, default='')
    description = models.TextField(blank=True, default='')
    quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(max_length=20, blank=True, default='un')
    alert_level = models.PositiveIntegerField(default=0)
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    supplier = models.CharField(max_length=120, blank=True, default='')
    location = models.CharField(max_length=80, blank=True, default='')
    expiration_date = models.DateField(null=True, blank=True)
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_item'
        ordering = ['name', 'id']
        verbose_name = 'Inventory Item'
        verbose_name_plural = 'Inventory Items'

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.alert_level

    @property
    def total_value(self) -> Decimal:
        return self.unit_cost * self.quantity


class StockMovement(models.Model):
    """One change to an item's quantity. Rows are never edited."""

    TYPE_ENTRY = 'entry'
    TYPE_EXIT = 'exit'
    TYPE_ADJUSTMENT = 'adjustment'

    TYPE_CHOICES = [
        (TYPE_ENTRY, 'Entrada'),
        (TYPE_EXIT, 'Saída'),
        (TYPE_ADJUSTMENT, 'Ajuste'),
    ]

    item = models.ForeignKey(
        InventoryItem,
        on_delete=models.PROTECT,
        related_name='movements',
    )
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    # Positive for entry/exit; signed delta for adjustments.
    quantity = models.IntegerField()
    quantity_after = models.PositiveIntegerField()
    reason = models.CharField(max_length=200, blank=True, default='')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'inventory_stock_movement'
        ordering = ['-created_at', '-id']
        verbose_name = 'Stock Movement'
        verbose_name_plural = 'Stock Movements'

    def __str__(self) -> str:
        return f"{self.movement_type} {self.quantity} x {self.item_id}"
