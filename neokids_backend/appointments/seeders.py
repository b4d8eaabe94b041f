from datetime import date

from django.contrib.auth import get_user_model
from django.db import transaction

from neokids_backend.catalog.models import Service
from neokids_backend.patients.models import Patient

from .models import Appointment
from .services import create_appointment_with_services

User = get_user_model()

DEMO_PATIENT = {
    "name": "Ana Clara Silva",
    "birth_date": date(2019, 3, 15),
    "cpf": "52998224725",
    "phone": "11987654321",
    "email": "responsavel.ana@email.com",
    "address": "Rua das Flores, 45 - São Paulo, SP",
    "responsible_name": "Carla Silva",
    "responsible_cpf": "11144477735",
    "responsible_phone": "11987654321",
    "special_alert": "Alergia a dipirona",
}

DEMO_SERVICE_CODES = ["HG001", "GL001"]


def seed_appointments() -> dict:
    """Creates the demo patient and books one appointment for her.

    The booking goes through the regular service, so it gets its pending
    results and audit entry. Runs once: a patient that already has
    appointments is left alone.
    """
    stats = {"appointments_patients": 0, "appointments_bookings": 0}

    with transaction.atomic():
        cpf = DEMO_PATIENT["cpf"]
        defaults = {k: v for k, v in DEMO_PATIENT.items() if k != "cpf"}
        patient, created = Patient.objects.get_or_create(cpf=cpf, defaults=defaults)
        stats["appointments_patients"] = int(created)

        if patient.appointments.exists():
            return stats

        service_ids = list(
            Service.objects.filter(code__in=DEMO_SERVICE_CODES, active=True).values_list("id", flat=True)
        )
        if not service_ids:
            return stats

        actor = User.objects.filter(email="atendente@neokids.com").first()
        create_appointment_with_services(
            data={
                "patient_id": patient.pk,
                "service_ids": service_ids,
                "payment_method": Appointment.PAYMENT_PIX,
                "status": Appointment.STATUS_AWAITING_COLLECTION,
            },
            user=actor,
        )
        stats["appointments_bookings"] = 1

    return stats
