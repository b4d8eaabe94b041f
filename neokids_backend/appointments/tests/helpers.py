"""Shared fixtures for appointment, lab board and result tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from rest_framework.test import APIClient

from neokids_backend.appointments.models import Appointment
from neokids_backend.appointments.services import create_appointment_with_services
from neokids_backend.catalog.models import Service
from neokids_backend.core.models import Role, User
from neokids_backend.patients.models import Patient


class ClinicFixtureMixin:
    """Roles, one user per role, a patient and two services (45.00 + 25.00)."""

    databases = {"default"}

    def setUp(self):
        super().setUp()
        self.role_admin, _ = Role.objects.get_or_create(name="admin", defaults={"label": "Administrador"})
        self.role_attendant, _ = Role.objects.get_or_create(name="attendant", defaults={"label": "Atendente"})
        self.role_technician, _ = Role.objects.get_or_create(name="technician", defaults={"label": "Técnico"})

        self.admin = User.objects.create_user(
            username="admin_appt",
            email="admin_appt@neokids.test",
            password="DummyPass123!",
            role=self.role_admin,
        )
        self.attendant = User.objects.create_user(
            username="attendant_appt",
            email="attendant_appt@neokids.test",
            password="DummyPass123!",
            role=self.role_attendant,
        )
        self.technician = User.objects.create_user(
            username="technician_appt",
            email="technician_appt@neokids.test",
            password="DummyPass123!",
            role=self.role_technician,
        )

        self.patient = Patient.objects.create(
            name="Ana Clara Silva",
            birth_date=date(2019, 3, 15),
            cpf="52998224725",
            phone="11987654321",
            address="Rua das Flores, 45",
            responsible_name="Carla Silva",
        )
        self.other_patient = Patient.objects.create(
            name="Pedro Souza",
            birth_date=date(2020, 7, 1),
            cpf="12345678909",
            phone="11912345678",
            address="Av. Brasil, 100",
            responsible_name="Paula Souza",
        )

        self.service_a = Service.objects.create(
            name="Hemograma Completo",
            code="HG001",
            category="Análises Clínicas",
            base_price=Decimal("45.00"),
            operational_cost=Decimal("12.00"),
        )
        self.service_b = Service.objects.create(
            name="Glicemia de Jejum",
            code="GL001",
            category="Análises Clínicas",
            base_price=Decimal("25.00"),
            operational_cost=Decimal("6.00"),
        )
        self.inactive_service = Service.objects.create(
            name="Exame Descontinuado",
            code="OLD001",
            category="Análises Clínicas",
            base_price=Decimal("10.00"),
            active=False,
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def _book(self, *, services=None, status=None, patient=None, user=None) -> Appointment:
        data = {
            "patient_id": (patient or self.patient).pk,
            "service_ids": [s.pk for s in (services or [self.service_a, self.service_b])],
            "payment_method": Appointment.PAYMENT_PIX,
        }
        if status:
            data["status"] = status
        return create_appointment_with_services(data=data, user=user or self.attendant)
