"""Appointments URLs.

Prefix: /api/
Routes:
    GET/POST  /api/appointments/                       - List / book
    GET       /api/appointments/<pk>/                  - Detail with results
    PATCH     /api/appointments/<pk>/status/           - Set any valid status
    GET       /api/lab/appointments/                   - Lab Kanban board
    POST      /api/lab/appointments/<pk>/advance/      - One step forward
    GET/PUT   /api/exam-results/                       - Read (?appointment_ids=) / upsert
"""

from django.urls import path

from neokids_backend.appointments.views import (
    AppointmentDetailView,
    AppointmentListCreateView,
    AppointmentStatusView,
    ExamResultView,
    LabAdvanceView,
    LabAppointmentListView,
)

app_name = 'appointments'

urlpatterns = [
    path('appointments/', AppointmentListCreateView.as_view(), name='list'),
    path('appointments/<int:pk>/', AppointmentDetailView.as_view(), name='detail'),
    path('appointments/<int:pk>/status/', AppointmentStatusView.as_view(), name='status'),
    path('lab/appointments/', LabAppointmentListView.as_view(), name='lab_board'),
    path('lab/appointments/<int:pk>/advance/', LabAdvanceView.as_view(), name='lab_advance'),
    path('exam-results/', ExamResultView.as_view(), name='exam_results'),
]
