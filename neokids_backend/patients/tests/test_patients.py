"""Tests for the patient registry API."""

from __future__ import annotations

from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from rest_framework.test import APIClient

from neokids_backend.core.models import AuditLog, Role, User
from neokids_backend.patients.models import Patient


class PatientAPITest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.role_admin, _ = Role.objects.get_or_create(name="admin", defaults={"label": "Administrador"})
        self.role_attendant, _ = Role.objects.get_or_create(name="attendant", defaults={"label": "Atendente"})
        self.role_technician, _ = Role.objects.get_or_create(name="technician", defaults={"label": "Técnico"})

        self.attendant = User.objects.create_user(
            username="attendant_patients",
            email="attendant_patients@neokids.test",
            password="DummyPass123!",
            role=self.role_attendant,
        )
        self.technician = User.objects.create_user(
            username="technician_patients",
            email="technician_patients@neokids.test",
            password="DummyPass123!",
            role=self.role_technician,
        )

        self.existing = Patient.objects.create(
            name="Pedro Souza",
            birth_date=date(2020, 7, 1),
            cpf="12345678909",
            phone="11912345678",
            address="Av. Brasil, 100 - Centro",
            responsible_name="Paula Souza",
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def _payload(self, **overrides):
        payload = {
            "name": "Ana Clara Silva",
            "birth_date": "2019-03-15",
            "cpf": "529.982.247-25",
            "phone": "(11) 98765-4321",
            "email": "carla@example.com",
            "address": "Rua das Flores, 45 - São Paulo",
            "responsible_name": "Carla Silva",
            "responsible_cpf": "",
            "responsible_phone": "",
            "special_alert": "Alergia a dipirona",
        }
        payload.update(overrides)
        return payload

    def test_create_stores_digits_and_audits(self):
        response = self._client_for(self.attendant).post("/api/patients/", self._payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["cpf"], "52998224725")
        self.assertEqual(response.data["cpf_formatted"], "529.982.247-25")
        self.assertEqual(response.data["phone"], "11987654321")
        self.assertEqual(response.data["phone_formatted"], "(11) 98765-4321")

        patient = Patient.objects.get(cpf="52998224725")
        self.assertEqual(patient.created_by, self.attendant)
        entry = AuditLog.objects.get(table_name="patients_patient", action=AuditLog.ACTION_INSERT)
        self.assertEqual(entry.record_id, str(patient.pk))

    def test_invalid_cpf_rejected(self):
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(cpf="529.982.247-26"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["cpf"], ["CPF inválido"])

    def test_duplicate_cpf_rejected(self):
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(cpf="123.456.789-09"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("cpf", response.data)

    def test_adult_patient_rejected(self):
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(birth_date="1990-01-01"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("birth_date", response.data)

    def test_future_birth_date_rejected(self):
        tomorrow = timezone.localdate() + timedelta(days=1)
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(birth_date=tomorrow.isoformat()), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["birth_date"], ["Data de nascimento não pode ser futura"])

    def test_impossible_birth_date_rejected(self):
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(birth_date="2020-13-45"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["birth_date"], ["Data de nascimento inválida"])

    def test_missing_required_fields_reported_per_field(self):
        response = self._client_for(self.attendant).post(
            "/api/patients/", self._payload(name="", address="curto"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.data), {"name", "address"})

    def test_search_by_name_and_cpf_digits(self):
        client = self._client_for(self.attendant)

        by_name = client.get("/api/patients/", {"search": "pedro"})
        by_cpf = client.get("/api/patients/", {"search": "456.789"})

        self.assertEqual([p["id"] for p in by_name.data], [self.existing.pk])
        self.assertEqual([p["id"] for p in by_cpf.data], [self.existing.pk])

    def test_short_search_returns_nothing(self):
        response = self._client_for(self.attendant).get("/api/patients/", {"search": "p"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [])

    def test_partial_update_is_audited(self):
        response = self._client_for(self.attendant).patch(
            f"/api/patients/{self.existing.pk}/",
            {"special_alert": "Asma"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["special_alert"], "Asma")
        entry = AuditLog.objects.get(table_name="patients_patient", action=AuditLog.ACTION_UPDATE)
        self.assertEqual(entry.old_data["special_alert"], "")
        self.assertEqual(entry.new_data["special_alert"], "Asma")

    def test_cpf_cannot_change(self):
        response = self._client_for(self.attendant).patch(
            f"/api/patients/{self.existing.pk}/",
            {"cpf": "111.444.777-35"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.existing.refresh_from_db()
        self.assertEqual(self.existing.cpf, "12345678909")

    def test_delete_is_not_allowed(self):
        response = self._client_for(self.attendant).delete(f"/api/patients/{self.existing.pk}/")
        self.assertEqual(response.status_code, 405)

    def test_technician_has_no_access(self):
        response = self._client_for(self.technician).get("/api/patients/")
        self.assertEqual(response.status_code, 403)

    def test_history_of_patient_without_appointments(self):
        response = self._client_for(self.attendant).get(f"/api/patients/{self.existing.pk}/history/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["patient"]["name"], "Pedro Souza")
        self.assertEqual(response.data["appointments"], [])

    def test_history_of_unknown_patient_returns_404(self):
        response = self._client_for(self.attendant).get("/api/patients/999999/history/")
        self.assertEqual(response.status_code, 404)
