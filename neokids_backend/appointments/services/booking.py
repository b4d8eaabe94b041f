"""Appointment booking and general status changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone

from neokids_backend.appointments.exceptions import InvalidBookingData, InvalidStatusTransition
from neokids_backend.appointments.models import Appointment, AppointmentService, ExamResult
from neokids_backend.catalog.models import Service
from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit
from neokids_backend.patients.models import Patient

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

VALID_STATUSES = {value for value, _label in Appointment.STATUS_CHOICES}
VALID_PAYMENT_METHODS = {value for value, _label in Appointment.PAYMENT_METHOD_CHOICES}
VALID_INSURANCE_TYPES = {value for value, _label in Appointment.INSURANCE_TYPE_CHOICES}


def _unique_ids(raw_ids) -> list[int]:
    """Integer ids in first-seen order, duplicates dropped."""
    seen: dict[int, None] = {}
    for raw in raw_ids:
        try:
            seen.setdefault(int(raw), None)
        except (TypeError, ValueError):
            raise InvalidBookingData(f'Invalid service id: {raw!r}', field='service_ids')
    return list(seen)


def create_appointment_with_services(
    *,
    data: dict,
    user: 'AbstractUser',
) -> Appointment:
    """
    Book an appointment for one patient with one or more services.

    Args:
        data: Dictionary with appointment data:
            - patient_id: int (required)
            - service_ids: list[int] (required, non-empty; duplicates collapse)
            - payment_method: str (required)
            - insurance_type: str (optional, defaults to 'private')
            - appointment_date: datetime (optional, defaults to now)
            - status: str (optional, defaults to 'scheduled')
            - notes: str (optional)
        user: The user booking the appointment

    Creates, in one transaction, the appointment, one join row per service and
    one pending ExamResult per service. Nothing is written if any step fails.

    Raises:
        InvalidBookingData: If the data cannot be booked
    """
    patient_id = data.get('patient_id')
    if patient_id is None:
        raise InvalidBookingData('patient_id is required', field='patient_id')

    service_ids = _unique_ids(data.get('service_ids') or [])
    if not service_ids:
        raise InvalidBookingData('At least one service is required', field='service_ids')

    payment_method = data.get('payment_method')
    if payment_method not in VALID_PAYMENT_METHODS:
        raise InvalidBookingData(f'Invalid payment method: {payment_method!r}', field='payment_method')

    insurance_type = data.get('insurance_type') or Appointment.INSURANCE_PRIVATE
    if insurance_type not in VALID_INSURANCE_TYPES:
        raise InvalidBookingData(f'Invalid insurance type: {insurance_type!r}', field='insurance_type')

    status = data.get('status') or Appointment.STATUS_SCHEDULED
    if status not in VALID_STATUSES:
        raise InvalidBookingData(f'Invalid status: {status!r}', field='status')

    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise InvalidBookingData(f'Patient with ID {patient_id} not found', field='patient_id')

    services = {s.pk: s for s in Service.objects.filter(pk__in=service_ids)}
    missing = [sid for sid in service_ids if sid not in services]
    if missing:
        raise InvalidBookingData(f'Services not found: {missing}', field='service_ids')
    inactive = [sid for sid in service_ids if not services[sid].active]
    if inactive:
        raise InvalidBookingData(f'Services are inactive: {inactive}', field='service_ids')

    with transaction.atomic():
        appointment = Appointment.objects.create(
            patient=patient,
            appointment_date=data.get('appointment_date') or timezone.now(),
            status=status,
            payment_method=payment_method,
            insurance_type=insurance_type,
            notes=data.get('notes') or '',
            created_by=user if getattr(user, 'is_authenticated', False) else None,
        )
        AppointmentService.objects.bulk_create(
            [AppointmentService(appointment=appointment, service=services[sid]) for sid in service_ids]
        )
        ExamResult.objects.bulk_create(
            [
                ExamResult(
                    appointment=appointment,
                    service=services[sid],
                    patient=patient,
                    status=ExamResult.STATUS_PENDING,
                    created_by=user if getattr(user, 'is_authenticated', False) else None,
                )
                for sid in service_ids
            ]
        )

        log_audit(
            user,
            AuditLog.ACTION_INSERT,
            appointment,
            new_data={
                'patient_id': patient.pk,
                'service_ids': service_ids,
                'status': status,
                'payment_method': payment_method,
                'insurance_type': insurance_type,
                'total_amount': str(appointment.total_amount),
            },
        )

    logger.info(
        'Appointment %s booked for patient %s with %d service(s)',
        appointment.pk, patient.pk, len(service_ids),
    )
    return appointment


def update_appointment_status(
    *,
    appointment_id: int,
    status: str,
    user: 'AbstractUser',
) -> Appointment:
    """
    Set any valid status on an appointment (check-in, cancel, no-show, ...).

    Raises:
        Appointment.DoesNotExist: If the appointment is unknown
        InvalidStatusTransition: If ``status`` is not a known status
    """
    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().get(pk=appointment_id)
        old_status = appointment.status

        if status not in VALID_STATUSES:
            logger.warning('Rejected status %r for appointment %s', status, appointment_id)
            raise InvalidStatusTransition(
                from_status=old_status,
                to_status=str(status),
                message=f'Unknown status: {status!r}',
            )

        appointment.status = status
        appointment.save(update_fields=['status', 'updated_at'])

        log_audit(
            user,
            AuditLog.ACTION_UPDATE,
            appointment,
            old_data={'status': old_status},
            new_data={'status': status},
        )

    logger.info('Appointment %s status %s -> %s', appointment.pk, old_status, status)
    return appointment
