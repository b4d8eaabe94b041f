from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Service(models.Model):
    """A bookable exam, imaging procedure or vaccine."""

    name = models.CharField(max_length=120)
    code = models.CharField(max_length=20, unique=True, db_index=True)
    category = models.CharField(max_length=80)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    operational_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    estimated_time = models.CharField(max_length=50, blank=True, default='')
    instructions = models.TextField(blank=True, default='')
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'catalog_service'
        ordering = ['name', 'id']
        verbose_name = 'Service'
        verbose_name_plural = 'Services'

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    @property
    def margin(self) -> Decimal:
        return self.base_price - self.operational_cost
