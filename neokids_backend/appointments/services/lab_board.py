"""Lab Kanban board: sample flow from collection to final report.

Only one step forward is allowed at a time:

    awaiting_collection -> in_analysis -> awaiting_report -> completed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from django.db import transaction
from django.db.models import QuerySet

from neokids_backend.appointments.exceptions import InvalidStatusTransition
from neokids_backend.appointments.models import Appointment
from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

_NEXT_LAB_STATUS = dict(zip(Appointment.LAB_FLOW, Appointment.LAB_FLOW[1:]))


def next_lab_status(status: str) -> Optional[str]:
    """Single successor of ``status`` on the board, or None at the end."""
    return _NEXT_LAB_STATUS.get(status)


def get_lab_appointments() -> QuerySet:
    """Appointments currently on the board, with patient and services."""
    return (
        Appointment.objects.filter(status__in=Appointment.LAB_FLOW)
        .select_related('patient')
        .prefetch_related('services')
        .order_by('appointment_date', 'id')
    )


def advance_lab_status(
    *,
    appointment_id: int,
    status: str,
    user: 'AbstractUser',
) -> Appointment:
    """
    Move an appointment exactly one step along the lab flow.

    The row is only written after the transition is validated; a rejected
    move leaves it untouched.

    Raises:
        Appointment.DoesNotExist: If the appointment is unknown
        InvalidStatusTransition: On skips, backward moves, or moves off the board
    """
    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().get(pk=appointment_id)
        current = appointment.status
        expected = next_lab_status(current)

        if current not in Appointment.LAB_FLOW:
            logger.warning('Appointment %s is not on the lab board (status=%s)', appointment_id, current)
            raise InvalidStatusTransition(
                from_status=current,
                to_status=str(status),
                message=f"Appointment is not on the lab board (status '{current}').",
            )
        if expected is None or status != expected:
            logger.warning('Rejected lab move %s -> %s for appointment %s', current, status, appointment_id)
            raise InvalidStatusTransition(from_status=current, to_status=str(status))

        appointment.status = status
        appointment.save(update_fields=['status', 'updated_at'])

        log_audit(
            user,
            AuditLog.ACTION_UPDATE,
            appointment,
            old_data={'status': current},
            new_data={'status': status},
        )

    logger.info('Appointment %s moved on lab board %s -> %s', appointment.pk, current, status)
    return appointment
