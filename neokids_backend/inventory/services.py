"""Stock movements: the only way an existing item's quantity changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import transaction

from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit
from neokids_backend.inventory.exceptions import InsufficientStockError, InvalidMovement
from neokids_backend.inventory.models import InventoryItem, StockMovement

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

VALID_MOVEMENT_TYPES = {value for value, _label in StockMovement.TYPE_CHOICES}


def movement_delta(movement_type: str, quantity: int) -> int:
    """Signed change a movement applies to the item's quantity.

    Raises:
        InvalidMovement: Unknown type, non-positive entry/exit, zero adjustment
    """
    if movement_type not in VALID_MOVEMENT_TYPES:
        raise InvalidMovement(f'Invalid movement type: {movement_type!r}', field='movement_type')
    if movement_type == StockMovement.TYPE_ADJUSTMENT:
        if quantity == 0:
            raise InvalidMovement('Adjustment cannot be zero.', field='quantity')
        return quantity
    if quantity <= 0:
        raise InvalidMovement('Quantity must be positive.', field='quantity')
    return quantity if movement_type == StockMovement.TYPE_ENTRY else -quantity


def record_movement(
    *,
    item_id: int,
    movement_type: str,
    quantity: int,
    reason: str = '',
    user: 'AbstractUser',
) -> StockMovement:
    """
    Apply one movement to an item and append it to the item's history.

    Raises:
        InventoryItem.DoesNotExist: If the item is unknown
        InvalidMovement: If the movement itself is malformed
        InsufficientStockError: If stock would drop below zero
    """
    delta = movement_delta(movement_type, quantity)
    actor = user if getattr(user, 'is_authenticated', False) else None

    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
        before = item.quantity
        after = before + delta
        if after < 0:
            logger.warning('Rejected %s of %s on item %s (stock %s)', movement_type, quantity, item_id, before)
            raise InsufficientStockError(item_id=item.pk, available=before, requested=abs(delta))

        item.quantity = after
        item.last_updated_by = actor
        item.save(update_fields=['quantity', 'last_updated_by', 'updated_at'])

        movement = StockMovement.objects.create(
            item=item,
            movement_type=movement_type,
            quantity=quantity,
            quantity_after=after,
            reason=reason or '',
            user=actor,
        )

        log_audit(
            user,
            AuditLog.ACTION_INSERT,
            movement,
            new_data={
                'item_id': item.pk,
                'movement_type': movement_type,
                'quantity': quantity,
                'quantity_before': before,
                'quantity_after': after,
                'reason': reason or '',
            },
        )

    logger.info('Item %s stock %s -> %s (%s)', item.pk, before, after, movement_type)
    if item.is_low_stock:
        logger.warning('Item %s (%s) is low on stock: %s <= %s', item.pk, item.name, after, item.alert_level)
    return movement
