from rest_framework import serializers

from neokids_backend.inventory.models import InventoryItem, StockMovement

ITEM_WRITE_FIELDS = [
    'name',
    'code',
    'category',
    'description',
    'quantity',
    'unit',
    'alert_level',
    'unit_cost',
    'supplier',
    'location',
    'expiration_date',
]


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    last_updated_by_email = serializers.CharField(source='last_updated_by.email', read_only=True, default=None)

    class Meta:
        model = InventoryItem
        fields = [
            'id',
            *ITEM_WRITE_FIELDS,
            'is_low_stock',
            'total_value',
            'last_updated_by_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class InventoryItemWriteSerializer(serializers.ModelSerializer):
    """Create/update an item. After creation, quantity changes go through movements."""

    class Meta:
        model = InventoryItem
        fields = ITEM_WRITE_FIELDS

    def validate_code(self, value):
        return (value or '').strip() or None

    def validate_quantity(self, value):
        if self.instance is not None and value != self.instance.quantity:
            raise serializers.ValidationError('Use a stock movement to change the quantity.')
        return value


class StockMovementSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    user_email = serializers.CharField(source='user.email', read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            'id',
            'item',
            'item_name',
            'movement_type',
            'quantity',
            'quantity_after',
            'reason',
            'user_email',
            'created_at',
        ]
        read_only_fields = fields


class StockMovementCreateSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)
    movement_type = serializers.ChoiceField(choices=StockMovement.TYPE_CHOICES)
    quantity = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=200)
