from rest_framework import serializers

MONEY = {'max_digits': 14, 'decimal_places': 2}


class DashboardStatsSerializer(serializers.Serializer):
    total_appointments = serializers.IntegerField()
    today_appointments = serializers.IntegerField()
    total_revenue = serializers.DecimalField(**MONEY)
    today_revenue = serializers.DecimalField(**MONEY)
    status_counts = serializers.DictField(child=serializers.IntegerField())


class RevenuePointSerializer(serializers.Serializer):
    period = serializers.CharField()
    value = serializers.DecimalField(**MONEY)


class CountPointSerializer(serializers.Serializer):
    period = serializers.CharField()
    value = serializers.IntegerField()


class ServiceBreakdownSerializer(serializers.Serializer):
    service_id = serializers.IntegerField()
    code = serializers.CharField()
    name = serializers.CharField()
    count = serializers.IntegerField()
    revenue = serializers.DecimalField(**MONEY)


class ReportSummarySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total_appointments = serializers.IntegerField()
    total_revenue = serializers.DecimalField(**MONEY)
    average_ticket = serializers.DecimalField(**MONEY)
    services = ServiceBreakdownSerializer(many=True)
