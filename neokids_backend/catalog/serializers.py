from rest_framework import serializers

from neokids_backend.catalog.models import Service


class ServiceReadSerializer(serializers.ModelSerializer):
    margin = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Service
        fields = [
            'id',
            'name',
            'code',
            'category',
            'base_price',
            'operational_cost',
            'margin',
            'estimated_time',
            'instructions',
            'active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ServiceSummarySerializer(serializers.ModelSerializer):
    """Compact form embedded in appointments and lab cards."""

    class Meta:
        model = Service
        fields = ['id', 'name', 'code', 'category', 'base_price', 'estimated_time', 'instructions']
        read_only_fields = fields


class ServiceWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = [
            'name',
            'code',
            'category',
            'base_price',
            'operational_cost',
            'estimated_time',
            'instructions',
            'active',
        ]

    def validate_code(self, value):
        return value.strip().upper()
