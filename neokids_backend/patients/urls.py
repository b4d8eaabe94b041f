"""Patients URLs.

Prefix: /api/
Routes:
    GET/POST   /api/patients/                - List (?search=) / create
    GET/PATCH  /api/patients/<pk>/           - Retrieve / update
    GET        /api/patients/<pk>/history/   - Appointments with services & results
"""

from django.urls import path

from neokids_backend.patients.views import (
    PatientHistoryView,
    PatientListCreateView,
    PatientRetrieveUpdateView,
)

app_name = 'patients'

urlpatterns = [
    path('patients/', PatientListCreateView.as_view(), name='list'),
    path('patients/<int:pk>/', PatientRetrieveUpdateView.as_view(), name='detail'),
    path('patients/<int:pk>/history/', PatientHistoryView.as_view(), name='history'),
]
