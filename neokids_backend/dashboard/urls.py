"""Dashboard & reports URLs.

Prefix: /api/
Routes:
    GET  /api/dashboard/stats/         - Front-page figures (all roles)
    GET  /api/reports/timeseries/      - Revenue or appointments per day/month
    GET  /api/reports/summary/         - Period totals and per-service breakdown
"""

from django.urls import path

from neokids_backend.dashboard.views import DashboardStatsView, ReportSummaryView, ReportTimeseriesView

app_name = 'dashboard'

urlpatterns = [
    path('dashboard/stats/', DashboardStatsView.as_view(), name='stats'),
    path('reports/timeseries/', ReportTimeseriesView.as_view(), name='timeseries'),
    path('reports/summary/', ReportSummaryView.as_view(), name='summary'),
]
