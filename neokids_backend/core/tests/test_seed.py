"""Tests for the `seed` management command."""

from __future__ import annotations

from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from neokids_backend.appointments.models import Appointment, ExamResult
from neokids_backend.catalog.models import Service
from neokids_backend.core.models import Role, SystemSetting, User
from neokids_backend.inventory.models import InventoryItem
from neokids_backend.patients.models import Patient


class SeedCommandTest(TestCase):
    databases = {"default"}

    def _seed(self, *args):
        out = StringIO()
        call_command("seed", *args, stdout=out)
        return out.getvalue()

    def test_seed_creates_demo_data(self):
        output = self._seed()

        self.assertIn("Seeding finished.", output)
        self.assertEqual(set(Role.objects.values_list("name", flat=True)), {"admin", "attendant", "technician"})
        self.assertEqual(User.objects.get(email="tecnico@neokids.com").role_name, "technician")
        self.assertTrue(User.objects.get(email="admin@neokids.com").check_password("admin123"))
        self.assertEqual(Service.objects.count(), 5)
        self.assertEqual(InventoryItem.objects.count(), 5)
        self.assertEqual(SystemSetting.get_value("default_currency"), "BRL")

        patient = Patient.objects.get(name="Ana Clara Silva")
        appointment = Appointment.objects.get(patient=patient)
        self.assertEqual(appointment.total_amount, Decimal("70.00"))
        self.assertEqual(appointment.status, Appointment.STATUS_AWAITING_COLLECTION)
        self.assertEqual(ExamResult.objects.filter(appointment=appointment, status="pending").count(), 2)

    def test_seed_twice_does_not_duplicate(self):
        self._seed()
        self._seed()

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Service.objects.count(), 5)
        self.assertEqual(Appointment.objects.count(), 1)

    def test_flush_keeps_referenced_services(self):
        self._seed()
        self._seed("--flush")

        self.assertEqual(Service.objects.count(), 5)
        self.assertEqual(Appointment.objects.count(), 1)
        self.assertEqual(User.objects.filter(email="admin@neokids.com").count(), 1)
