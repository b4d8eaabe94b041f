"""
Appointments service layer.

- booking: create appointments with their services, general status changes
- lab_board: Kanban flow for samples (one step at a time)
- results: exam result upsert (join row + canonical row in one transaction)
"""

from neokids_backend.appointments.services.booking import (
    create_appointment_with_services,
    update_appointment_status,
)
from neokids_backend.appointments.services.lab_board import (
    advance_lab_status,
    get_lab_appointments,
    next_lab_status,
)
from neokids_backend.appointments.services.results import (
    resolve_result_status,
    upsert_exam_result,
)

__all__ = [
    'advance_lab_status',
    'create_appointment_with_services',
    'get_lab_appointments',
    'next_lab_status',
    'resolve_result_status',
    'update_appointment_status',
    'upsert_exam_result',
]
