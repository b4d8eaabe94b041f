"""Tests for POST /api/admin/users/ (action-dispatched user administration)."""

from __future__ import annotations

from django.core import mail
from django.test import TestCase

from rest_framework.test import APIClient

from neokids_backend.core.models import AuditLog, Role, User


class UserManagementAPITest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.role_admin, _ = Role.objects.get_or_create(name="admin", defaults={"label": "Administrador"})
        self.role_attendant, _ = Role.objects.get_or_create(name="attendant", defaults={"label": "Atendente"})
        self.role_technician, _ = Role.objects.get_or_create(name="technician", defaults={"label": "Técnico"})

        self.admin = User.objects.create_user(
            username="admin@neokids.test",
            email="admin@neokids.test",
            password="DummyPass123!",
            role=self.role_admin,
        )
        self.attendant = User.objects.create_user(
            username="atendente@neokids.test",
            email="atendente@neokids.test",
            password="DummyPass123!",
            role=self.role_attendant,
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def _call(self, action, payload=None, user=None):
        return self._client_for(user or self.admin).post(
            "/api/admin/users/",
            {"action": action, "payload": payload or {}},
            format="json",
        )

    def test_list_users_returns_roles(self):
        response = self._call("list-users")

        self.assertEqual(response.status_code, 200)
        emails = {u["email"]: u["role"]["name"] for u in response.data["users"]}
        self.assertEqual(emails["atendente@neokids.test"], "attendant")

    def test_non_admin_is_forbidden(self):
        response = self._call("list-users", user=self.attendant)
        self.assertEqual(response.status_code, 403)

    def test_unknown_action_returns_400(self):
        response = self._call("promote-everyone")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unknown action", response.data["detail"])

    def test_update_user_role_is_audited(self):
        response = self._call("update-user-role", {"user_id": self.attendant.id, "role": "technician"})

        self.assertEqual(response.status_code, 200)
        self.attendant.refresh_from_db()
        self.assertEqual(self.attendant.role, self.role_technician)

        entry = AuditLog.objects.get(table_name="auth.users", action="UPDATE")
        self.assertEqual(entry.record_id, str(self.attendant.id))
        self.assertEqual(entry.old_data, {"role": "attendant"})
        self.assertEqual(entry.new_data, {"role": "technician"})

    def test_update_user_role_missing_field_returns_400(self):
        response = self._call("update-user-role", {"user_id": self.attendant.id})
        self.assertEqual(response.status_code, 400)
        self.assertIn("role", response.data)

    def test_update_user_role_unknown_role_returns_400(self):
        response = self._call("update-user-role", {"user_id": self.attendant.id, "role": "doctor"})
        self.assertEqual(response.status_code, 400)

    def test_delete_user(self):
        response = self._call("delete-user", {"user_id": self.attendant.id})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(pk=self.attendant.pk).exists())
        entry = AuditLog.objects.get(table_name="auth.users", action="DELETE")
        self.assertEqual(entry.old_data["email"], "atendente@neokids.test")
        self.assertNotIn("password", entry.old_data)

    def test_admin_cannot_delete_self(self):
        response = self._call("delete-user", {"user_id": self.admin.id})
        self.assertEqual(response.status_code, 400)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_missing_user_returns_404(self):
        response = self._call("delete-user", {"user_id": 999999})
        self.assertEqual(response.status_code, 404)

    def test_create_user(self):
        response = self._call("create-user", {
            "email": "nova@neokids.test",
            "password": "SenhaForte123",
            "role": "technician",
            "name": "Carla Dias",
        })

        self.assertEqual(response.status_code, 201)
        user = User.objects.get(email="nova@neokids.test")
        self.assertTrue(user.check_password("SenhaForte123"))
        self.assertEqual(user.first_name, "Carla")
        self.assertEqual(user.last_name, "Dias")
        self.assertEqual(user.role_name, "technician")
        self.assertTrue(AuditLog.objects.filter(table_name="auth.users", action="INSERT").exists())

    def test_create_user_duplicate_email_returns_400(self):
        response = self._call("create-user", {
            "email": "atendente@neokids.test",
            "password": "SenhaForte123",
            "role": "technician",
            "name": "Outra Pessoa",
        })
        self.assertEqual(response.status_code, 400)

    def test_invite_user_sends_email(self):
        response = self._call("invite-user", {"email": "convite@neokids.test", "role": "attendant"})

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["email_sent"])
        user = User.objects.get(email="convite@neokids.test")
        self.assertFalse(user.has_usable_password())
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["convite@neokids.test"])


class UserEmailTest(TestCase):
    databases = {"default"}

    def test_accounts_without_email_can_coexist(self):
        first = User.objects.create_user(username="sem-email-1", password="DummyPass123!")
        second = User.objects.create_user(username="sem-email-2", email="", password="DummyPass123!")

        self.assertIsNone(first.email)
        self.assertIsNone(second.email)
        self.assertEqual(User.objects.filter(email__isnull=True).count(), 2)

    def test_superuser_without_email(self):
        User.objects.create_superuser(username="root-1", email="", password="DummyPass123!")
        User.objects.create_superuser(username="root-2", email="", password="DummyPass123!")

        self.assertEqual(User.objects.filter(is_superuser=True, email__isnull=True).count(), 2)
