"""Exam result entry.

A result is written to two places: the appointment's join row (what the bench
sees) and the canonical ExamResult row. Both writes share one transaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from django.db import transaction
from django.utils import timezone

from neokids_backend.appointments.exceptions import ResultWriteError
from neokids_backend.appointments.models import Appointment, AppointmentService, ExamResult
from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit, snapshot

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

VALID_RESULT_STATUSES = {value for value, _label in ExamResult.STATUS_CHOICES}

RESULT_SNAPSHOT_FIELDS = ['appointment', 'service', 'patient', 'result_data', 'notes', 'status']


def resolve_result_status(current: Optional[str], requested: Optional[str]) -> str:
    """
    Status a result ends up in after a write.

    - An explicit status must be known; 'pending' is refused once the row
      has left pending.
    - Without one, the write becomes 'final', or 'corrected' when the row
      was already final or corrected.
    """
    if requested:
        if requested not in VALID_RESULT_STATUSES:
            raise ResultWriteError(f'Invalid result status: {requested!r}', field='status')
        if requested == ExamResult.STATUS_PENDING and current not in (None, ExamResult.STATUS_PENDING):
            raise ResultWriteError('A result cannot return to pending.', field='status')
        return requested

    if current in ExamResult.ISSUED_STATUSES:
        return ExamResult.STATUS_CORRECTED
    return ExamResult.STATUS_FINAL


def upsert_exam_result(
    *,
    appointment_id: int,
    service_id: int,
    patient_id: int,
    result_data: Any,
    notes: str = '',
    status: Optional[str] = None,
    user: Optional['AbstractUser'],
) -> ExamResult:
    """
    Insert or update the result of one service within one appointment.

    Last write wins. Repeating the call for the same (appointment, service)
    leaves exactly one row holding the latest values.

    Raises:
        ResultWriteError: No authenticated actor, the service is not part of
            the appointment, the patient does not match, or the status is bad
        Appointment.DoesNotExist: If the appointment is unknown
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        raise ResultWriteError('An authenticated user is required.', unauthenticated=True)

    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().get(pk=appointment_id)

        if appointment.patient_id != int(patient_id):
            raise ResultWriteError('Patient does not match the appointment.', field='patient_id')

        line = (
            AppointmentService.objects.select_for_update()
            .filter(appointment=appointment, service_id=service_id)
            .first()
        )
        if line is None:
            raise ResultWriteError('Service is not part of this appointment.', field='service_id')

        existing = (
            ExamResult.objects.select_for_update()
            .filter(appointment=appointment, service_id=service_id)
            .first()
        )
        old_data = snapshot(existing, fields=RESULT_SNAPSHOT_FIELDS)
        new_status = resolve_result_status(existing.status if existing else None, status)

        line.result_data = result_data
        line.notes = notes or ''
        line.save(update_fields=['result_data', 'notes', 'updated_at'])

        defaults = {
            'patient_id': appointment.patient_id,
            'result_data': result_data,
            'notes': notes or '',
            'status': new_status,
            'updated_by': user,
        }
        if new_status in ExamResult.ISSUED_STATUSES:
            defaults['issued_at'] = timezone.now()

        result, created = ExamResult.objects.update_or_create(
            appointment=appointment,
            service_id=service_id,
            defaults=defaults,
            create_defaults={**defaults, 'created_by': user},
        )

        log_audit(
            user,
            AuditLog.ACTION_INSERT if created else AuditLog.ACTION_UPDATE,
            result,
            old_data=old_data,
            new_data=snapshot(result, fields=RESULT_SNAPSHOT_FIELDS),
        )

    logger.info(
        'Result for appointment %s / service %s written (status=%s, created=%s)',
        appointment_id, service_id, new_status, created,
    )
    return result
