import logging

from django.db.models import F, ProtectedError

from rest_framework import generics, status
from rest_framework.response import Response

from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit, snapshot
from neokids_backend.inventory.exceptions import InventoryError
from neokids_backend.inventory.models import InventoryItem, StockMovement
from neokids_backend.inventory.permissions import InventoryPermission
from neokids_backend.inventory.serializers import (
    InventoryItemSerializer,
    InventoryItemWriteSerializer,
    StockMovementCreateSerializer,
    StockMovementSerializer,
)
from neokids_backend.inventory.services import record_movement

logger = logging.getLogger(__name__)


class InventoryItemListCreateView(generics.ListCreateAPIView):
    """GET/POST /api/inventory/items/ (?low_stock=1 for items at or below alert level)."""

    permission_classes = [InventoryPermission]

    def get_queryset(self):
        qs = InventoryItem.objects.select_related('last_updated_by')
        if self.request.query_params.get('low_stock') in ('1', 'true', 'True'):
            qs = qs.filter(quantity__lte=F('alert_level'))
        return qs

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return InventoryItemWriteSerializer
        return InventoryItemSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = serializer.save(last_updated_by=request.user)

        log_audit(request.user, AuditLog.ACTION_INSERT, item, new_data=snapshot(item))
        logger.info('Inventory item %s (%s) created', item.pk, item.code)
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


class InventoryItemDetailView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/DELETE /api/inventory/items/<pk>/

    Items with recorded movements cannot be deleted (409).
    """

    permission_classes = [InventoryPermission]
    queryset = InventoryItem.objects.select_related('last_updated_by')

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return InventoryItemWriteSerializer
        return InventoryItemSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        item = self.get_object()
        old_data = snapshot(item)

        serializer = self.get_serializer(item, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        item = serializer.save(last_updated_by=request.user)

        log_audit(request.user, AuditLog.ACTION_UPDATE, item, old_data=old_data, new_data=snapshot(item))
        return Response(InventoryItemSerializer(item).data)

    def destroy(self, request, *args, **kwargs):
        item = self.get_object()
        old_data = snapshot(item)
        record_id = item.pk

        try:
            item.delete()
        except ProtectedError:
            return Response(
                {'detail': 'Item has stock movements and cannot be deleted.'},
                status=status.HTTP_409_CONFLICT,
            )

        log_audit(
            request.user,
            AuditLog.ACTION_DELETE,
            table_name=InventoryItem._meta.db_table,
            record_id=record_id,
            old_data=old_data,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class StockMovementListCreateView(generics.ListCreateAPIView):
    """GET/POST /api/inventory/movements/ (?item=<id>)."""

    permission_classes = [InventoryPermission]

    def get_queryset(self):
        qs = StockMovement.objects.select_related('item', 'user')
        item_id = self.request.query_params.get('item')
        if item_id and item_id.isdigit():
            qs = qs.filter(item_id=int(item_id))
        return qs

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return StockMovementCreateSerializer
        return StockMovementSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = record_movement(
                item_id=data['item_id'],
                movement_type=data['movement_type'],
                quantity=data['quantity'],
                reason=data.get('reason', ''),
                user=request.user,
            )
        except InventoryItem.DoesNotExist:
            return Response({'detail': 'Not found.'}, status=status.HTTP_404_NOT_FOUND)
        except InventoryError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
