from rest_framework import generics, status
from rest_framework.response import Response

from neokids_backend.dashboard.exceptions import InvalidReportParams
from neokids_backend.dashboard.permissions import DashboardPermission, ReportPermission
from neokids_backend.dashboard.reports import (
    METRIC_REVENUE,
    get_report_summary,
    get_timeseries_stats,
    parse_date_range,
    parse_timeseries_params,
)
from neokids_backend.dashboard.serializers import (
    CountPointSerializer,
    DashboardStatsSerializer,
    ReportSummarySerializer,
    RevenuePointSerializer,
)
from neokids_backend.dashboard.stats import get_dashboard_stats


class DashboardStatsView(generics.GenericAPIView):
    """GET /api/dashboard/stats/"""

    permission_classes = [DashboardPermission]
    serializer_class = DashboardStatsSerializer

    def get(self, request, *args, **kwargs):
        return Response(self.get_serializer(get_dashboard_stats()).data, status=status.HTTP_200_OK)


class ReportTimeseriesView(generics.GenericAPIView):
    """GET /api/reports/timeseries/?metric=&start_date=&end_date=&time_unit="""

    permission_classes = [ReportPermission]

    def get(self, request, *args, **kwargs):
        try:
            params = parse_timeseries_params(request.query_params)
        except InvalidReportParams as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        points = get_timeseries_stats(**params)
        serializer_class = RevenuePointSerializer if params['metric'] == METRIC_REVENUE else CountPointSerializer
        return Response(
            {
                'metric': params['metric'],
                'time_unit': params['time_unit'],
                'start_date': params['start_date'].isoformat(),
                'end_date': params['end_date'].isoformat(),
                'data': serializer_class(points, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class ReportSummaryView(generics.GenericAPIView):
    """GET /api/reports/summary/?start_date=&end_date="""

    permission_classes = [ReportPermission]
    serializer_class = ReportSummarySerializer

    def get(self, request, *args, **kwargs):
        try:
            start, end = parse_date_range(request.query_params)
        except InvalidReportParams as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        summary = get_report_summary(start_date=start, end_date=end)
        return Response(self.get_serializer(summary).data, status=status.HTTP_200_OK)
