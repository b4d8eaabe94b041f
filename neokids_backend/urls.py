"""Neokids URL Configuration.

API routes:
    /api/health/, /api/auth/      - Health check & authentication (core)
    /api/audit-logs/, /api/settings/, /api/admin/users/ - Admin surface (core)
    /api/patients/                - Patients (patients)
    /api/services/                - Service catalog (catalog)
    /api/appointments/, /api/lab/, /api/exam-results/ - Appointments & results
    /api/inventory/               - Stock (inventory)
    /api/dashboard/, /api/reports/ - Aggregations (dashboard)
"""

from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path


def root(request):
    """Plain-text liveness response."""
    return HttpResponse("Neokids backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", admin.site.urls),

    path("api/", include("neokids_backend.core.urls")),
    path("api/", include("neokids_backend.patients.urls")),
    path("api/", include("neokids_backend.catalog.urls")),
    path("api/", include("neokids_backend.appointments.urls")),
    path("api/", include("neokids_backend.inventory.urls")),
    path("api/", include("neokids_backend.dashboard.urls")),
]
