"""HTTP layer for booking, status changes and exam results."""

from __future__ import annotations

from django.test import TestCase

from neokids_backend.appointments.models import Appointment, ExamResult
from neokids_backend.appointments.tests.helpers import ClinicFixtureMixin


class AppointmentAPITest(ClinicFixtureMixin, TestCase):
    def _payload(self, **overrides):
        payload = {
            "patient_id": self.patient.pk,
            "service_ids": [self.service_a.pk, self.service_b.pk],
            "payment_method": "pix",
        }
        payload.update(overrides)
        return payload

    def test_attendant_books_appointment(self):
        response = self._client_for(self.attendant).post("/api/appointments/", self._payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total_amount"], "70.00")
        self.assertEqual(response.data["status"], "scheduled")
        self.assertEqual(response.data["insurance_type"], "private")
        self.assertEqual({s["code"] for s in response.data["services"]}, {"HG001", "GL001"})

    def test_empty_service_list_returns_400(self):
        response = self._client_for(self.attendant).post(
            "/api/appointments/", self._payload(service_ids=[]), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("service_ids", response.data)
        self.assertFalse(Appointment.objects.exists())

    def test_unknown_patient_returns_400_with_field(self):
        response = self._client_for(self.attendant).post(
            "/api/appointments/", self._payload(patient_id=999999), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "patient_id")

    def test_technician_cannot_book(self):
        response = self._client_for(self.technician).post("/api/appointments/", self._payload(), format="json")
        self.assertEqual(response.status_code, 403)

    def test_list_filters_by_status(self):
        self._book(status=Appointment.STATUS_CANCELED)
        kept = self._book(patient=self.other_patient)

        response = self._client_for(self.attendant).get("/api/appointments/", {"status": "scheduled"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([a["id"] for a in response.data], [kept.pk])

    def test_detail_includes_exam_results(self):
        appointment = self._book()

        response = self._client_for(self.admin).get(f"/api/appointments/{appointment.pk}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["exam_results"]), 2)
        self.assertEqual({r["status"] for r in response.data["exam_results"]}, {"pending"})

    def test_status_patch_accepts_any_valid_status(self):
        appointment = self._book()

        response = self._client_for(self.attendant).patch(
            f"/api/appointments/{appointment.pk}/status/", {"status": "no-show"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "no-show")

    def test_status_patch_unknown_status_returns_400(self):
        appointment = self._book()

        response = self._client_for(self.attendant).patch(
            f"/api/appointments/{appointment.pk}/status/", {"status": "lost"}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "status")

    def test_status_patch_unknown_appointment_returns_404(self):
        response = self._client_for(self.attendant).patch(
            "/api/appointments/999999/status/", {"status": "canceled"}, format="json"
        )
        self.assertEqual(response.status_code, 404)


class ExamResultAPITest(ClinicFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.appointment = self._book(status=Appointment.STATUS_IN_ANALYSIS)

    def _put(self, user, **overrides):
        payload = {
            "appointment_id": self.appointment.pk,
            "service_id": self.service_a.pk,
            "patient_id": self.patient.pk,
            "result_data": {"hemoglobin": "12.5"},
        }
        payload.update(overrides)
        return self._client_for(user).put("/api/exam-results/", payload, format="json")

    def test_technician_writes_result(self):
        response = self._put(self.technician)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "final")
        self.assertEqual(response.data["service_code"], "HG001")
        self.assertEqual(response.data["updated_by_email"], self.technician.email)

    def test_attendant_cannot_write_result(self):
        response = self._put(self.attendant)
        self.assertEqual(response.status_code, 403)

    def test_attendant_can_read_results(self):
        response = self._client_for(self.attendant).get(
            "/api/exam-results/", {"appointment_ids": str(self.appointment.pk)}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

    def test_read_requires_appointment_ids(self):
        response = self._client_for(self.technician).get("/api/exam-results/")
        self.assertEqual(response.status_code, 400)

    def test_read_rejects_non_integer_ids(self):
        response = self._client_for(self.technician).get("/api/exam-results/", {"appointment_ids": "1,x"})
        self.assertEqual(response.status_code, 400)

    def test_service_not_booked_returns_400(self):
        response = self._put(self.technician, service_id=self.inactive_service.pk)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "service_id")

    def test_unknown_appointment_returns_404(self):
        response = self._put(self.technician, appointment_id=999999)
        self.assertEqual(response.status_code, 404)


class FrontDeskToReportScenarioTest(ClinicFixtureMixin, TestCase):
    """Register a patient, book two services, run the lab flow and report one of them."""

    def test_full_visit(self):
        front_desk = self._client_for(self.attendant)
        lab = self._client_for(self.technician)

        registered = front_desk.post(
            "/api/patients/",
            {
                "name": "Ana Clara Souza",
                "birth_date": "2020-05-10",
                "cpf": "111.444.777-35",
                "phone": "(11) 91234-5678",
                "email": "responsavel@example.com",
                "address": "Rua das Acácias, 120 - São Paulo",
                "responsible_name": "Marina Souza",
            },
            format="json",
        )
        self.assertEqual(registered.status_code, 201)
        patient_id = registered.data["id"]

        booked = front_desk.post(
            "/api/appointments/",
            {
                "patient_id": patient_id,
                "service_ids": [self.service_a.pk, self.service_b.pk],
                "payment_method": "credit",
            },
            format="json",
        )
        self.assertEqual(booked.status_code, 201)
        self.assertEqual(booked.data["total_amount"], "70.00")
        appointment_id = booked.data["id"]

        checked_in = front_desk.patch(
            f"/api/appointments/{appointment_id}/status/", {"status": "awaiting_collection"}, format="json"
        )
        self.assertEqual(checked_in.status_code, 200)

        for status in ("in_analysis", "awaiting_report"):
            moved = lab.post(f"/api/lab/appointments/{appointment_id}/advance/", {"status": status}, format="json")
            self.assertEqual(moved.status_code, 200)

        written = lab.put(
            "/api/exam-results/",
            {
                "appointment_id": appointment_id,
                "service_id": self.service_a.pk,
                "patient_id": patient_id,
                "result_data": "12.5",
            },
            format="json",
        )
        self.assertEqual(written.status_code, 200)
        self.assertEqual(written.data["status"], "final")

        listed = lab.get("/api/exam-results/", {"appointment_ids": str(appointment_id)})
        self.assertEqual(listed.status_code, 200)
        by_service = {row["service"]: row for row in listed.data}
        self.assertEqual(set(by_service), {self.service_a.pk, self.service_b.pk})
        self.assertEqual(by_service[self.service_a.pk]["result_data"], "12.5")
        self.assertEqual(by_service[self.service_a.pk]["status"], ExamResult.STATUS_FINAL)
        self.assertEqual(by_service[self.service_b.pk]["status"], ExamResult.STATUS_PENDING)

        done = lab.post(f"/api/lab/appointments/{appointment_id}/advance/", {"status": "completed"}, format="json")
        self.assertEqual(done.status_code, 200)

        history = front_desk.get(f"/api/patients/{patient_id}/history/")
        self.assertEqual(history.status_code, 200)
        self.assertEqual(history.data["appointments"][0]["status"], "completed")
        self.assertEqual(history.data["appointments"][0]["total_amount"], "70.00")
