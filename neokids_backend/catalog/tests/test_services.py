"""Tests for the service catalog API."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from rest_framework.test import APIClient

from neokids_backend.appointments.services import create_appointment_with_services
from neokids_backend.catalog.models import Service
from neokids_backend.catalog.seeders import DEMO_SERVICES, seed_catalog
from neokids_backend.core.models import AuditLog, Role, User
from neokids_backend.patients.models import Patient


class ServiceAPITest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.role_admin, _ = Role.objects.get_or_create(name="admin", defaults={"label": "Administrador"})
        self.role_technician, _ = Role.objects.get_or_create(name="technician", defaults={"label": "Técnico"})

        self.admin = User.objects.create_user(
            username="admin_catalog",
            email="admin_catalog@neokids.test",
            password="DummyPass123!",
            role=self.role_admin,
        )
        self.technician = User.objects.create_user(
            username="technician_catalog",
            email="technician_catalog@neokids.test",
            password="DummyPass123!",
            role=self.role_technician,
        )

        self.hemogram = Service.objects.create(
            name="Hemograma Completo",
            code="HG001",
            category="Análises Clínicas",
            base_price=Decimal("45.00"),
            operational_cost=Decimal("12.00"),
        )
        self.retired = Service.objects.create(
            name="Exame Antigo",
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

    def test_margin_property(self):
        self.assertEqual(self.hemogram.margin, Decimal("33.00"))

    def test_every_role_can_list(self):
        response = self._client_for(self.technician).get("/api/services/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual({s["code"] for s in response.data}, {"HG001", "OLD001"})
        hemogram = next(s for s in response.data if s["code"] == "HG001")
        self.assertEqual(hemogram["margin"], "33.00")

    def test_active_filter(self):
        client = self._client_for(self.technician)

        active = client.get("/api/services/", {"active": "1"})
        inactive = client.get("/api/services/", {"active": "0"})

        self.assertEqual([s["code"] for s in active.data], ["HG001"])
        self.assertEqual([s["code"] for s in inactive.data], ["OLD001"])

    def test_admin_creates_service_with_uppercase_code(self):
        response = self._client_for(self.admin).post(
            "/api/services/",
            {
                "name": "Radiografia de Tórax",
                "code": " rx001 ",
                "category": "Exames de Imagem",
                "base_price": "120.00",
                "operational_cost": "35.00",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["code"], "RX001")
        self.assertEqual(response.data["margin"], "85.00")
        self.assertTrue(
            AuditLog.objects.filter(table_name="catalog_service", action=AuditLog.ACTION_INSERT).exists()
        )

    def test_negative_price_rejected(self):
        response = self._client_for(self.admin).post(
            "/api/services/",
            {"name": "X", "code": "NEG001", "category": "Vacinas", "base_price": "-1.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("base_price", response.data)

    def test_technician_cannot_write(self):
        response = self._client_for(self.technician).patch(
            f"/api/services/{self.hemogram.pk}/", {"base_price": "1.00"}, format="json"
        )
        self.assertEqual(response.status_code, 403)

    def test_update_is_audited(self):
        response = self._client_for(self.admin).patch(
            f"/api/services/{self.hemogram.pk}/", {"base_price": "50.00"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["base_price"], "50.00")
        entry = AuditLog.objects.get(table_name="catalog_service", action=AuditLog.ACTION_UPDATE)
        self.assertEqual(entry.old_data["base_price"], "45.00")
        self.assertEqual(entry.new_data["base_price"], "50.00")

    def test_unreferenced_service_can_be_deleted(self):
        response = self._client_for(self.admin).delete(f"/api/services/{self.retired.pk}/")

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Service.objects.filter(pk=self.retired.pk).exists())
        entry = AuditLog.objects.get(table_name="catalog_service", action=AuditLog.ACTION_DELETE)
        self.assertEqual(entry.record_id, str(self.retired.pk))

    def test_referenced_service_cannot_be_deleted(self):
        patient = Patient.objects.create(
            name="Ana Clara Silva",
            birth_date=date(2019, 3, 15),
            cpf="52998224725",
            phone="11987654321",
            address="Rua das Flores, 45",
            responsible_name="Carla Silva",
        )
        create_appointment_with_services(
            data={"patient_id": patient.pk, "service_ids": [self.hemogram.pk], "payment_method": "cash"},
            user=self.admin,
        )

        response = self._client_for(self.admin).delete(f"/api/services/{self.hemogram.pk}/")

        self.assertEqual(response.status_code, 409)
        self.assertTrue(Service.objects.filter(pk=self.hemogram.pk).exists())


class CatalogSeederTest(TestCase):
    databases = {"default"}

    def test_seed_is_idempotent(self):
        first = seed_catalog()
        second = seed_catalog()

        self.assertEqual(first["catalog_services"], len(DEMO_SERVICES))
        self.assertEqual(second["catalog_services"], 0)
        self.assertEqual(Service.objects.get(code="HG001").base_price, Decimal("45.00"))
