"""Domain exceptions for stock movements."""

from __future__ import annotations

from typing import Any


class InventoryError(Exception):
    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = {'detail': str(self)}
        if self.field:
            result['field'] = self.field
        return result


class InvalidMovement(InventoryError):
    """Unknown movement type or a quantity that makes no sense for it."""


class InsufficientStockError(InventoryError):
    """Raised when an exit or adjustment would take stock below zero."""

    def __init__(self, *, item_id: int, available: int, requested: int):
        self.item_id = item_id
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient stock for item {item_id}: {available} available, {requested} requested.',
            field='quantity',
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result['available'] = self.available
        result['requested'] = self.requested
        return result
