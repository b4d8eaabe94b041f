"""Tests for stock items and movements."""

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from rest_framework.test import APIClient

from neokids_backend.core.models import AuditLog, Role, User
from neokids_backend.inventory.exceptions import InsufficientStockError, InvalidMovement
from neokids_backend.inventory.models import InventoryItem, StockMovement
from neokids_backend.inventory.seeders import DEMO_ITEMS, seed_inventory
from neokids_backend.inventory.services import movement_delta, record_movement


class InventoryTestMixin:
    databases = {"default"}

    def setUp(self):
        super().setUp()
        self.role_admin, _ = Role.objects.get_or_create(name="admin", defaults={"label": "Administrador"})
        self.role_attendant, _ = Role.objects.get_or_create(name="attendant", defaults={"label": "Atendente"})
        self.role_technician, _ = Role.objects.get_or_create(name="technician", defaults={"label": "Técnico"})

        self.technician = User.objects.create_user(
            username="technician_stock",
            email="technician_stock@neokids.test",
            password="DummyPass123!",
            role=self.role_technician,
        )
        self.attendant = User.objects.create_user(
            username="attendant_stock",
            email="attendant_stock@neokids.test",
            password="DummyPass123!",
            role=self.role_attendant,
        )

        self.tubes = InventoryItem.objects.create(
            name="Tubos de coleta EDTA",
            code="TUB-001",
            quantity=5,
            alert_level=10,
            unit_cost=Decimal("2.50"),
        )
        self.gloves = InventoryItem.objects.create(
            name="Luvas de Procedimento",
            code="LUV-PROC",
            quantity=150,
            alert_level=50,
            unit="par",
            unit_cost=Decimal("0.45"),
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client


class InventoryItemModelTest(InventoryTestMixin, TestCase):
    def test_low_stock_is_derived(self):
        self.assertTrue(self.tubes.is_low_stock)
        self.assertFalse(self.gloves.is_low_stock)

        self.tubes.quantity = 11
        self.assertFalse(self.tubes.is_low_stock)

    def test_low_stock_includes_alert_level(self):
        self.tubes.quantity = 10
        self.assertTrue(self.tubes.is_low_stock)

    def test_total_value(self):
        self.assertEqual(self.tubes.total_value, Decimal("12.50"))
        self.assertEqual(self.gloves.total_value, Decimal("67.50"))


class RecordMovementTest(InventoryTestMixin, TestCase):
    def test_delta_by_type(self):
        self.assertEqual(movement_delta("entry", 3), 3)
        self.assertEqual(movement_delta("exit", 3), -3)
        self.assertEqual(movement_delta("adjustment", -2), -2)

    def test_malformed_movements(self):
        with self.assertRaises(InvalidMovement):
            movement_delta("loss", 1)
        with self.assertRaises(InvalidMovement):
            movement_delta("exit", 0)
        with self.assertRaises(InvalidMovement):
            movement_delta("entry", -5)
        with self.assertRaises(InvalidMovement):
            movement_delta("adjustment", 0)

    def test_entry_adds_and_stamps_user(self):
        movement = record_movement(item_id=self.tubes.pk, movement_type="entry", quantity=20, user=self.technician)

        self.tubes.refresh_from_db()
        self.assertEqual(self.tubes.quantity, 25)
        self.assertEqual(self.tubes.last_updated_by, self.technician)
        self.assertEqual(movement.quantity_after, 25)

    def test_exit_below_zero_is_rejected(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            record_movement(item_id=self.tubes.pk, movement_type="exit", quantity=6, user=self.technician)

        self.assertEqual(ctx.exception.available, 5)
        self.assertEqual(ctx.exception.requested, 6)
        self.tubes.refresh_from_db()
        self.assertEqual(self.tubes.quantity, 5)
        self.assertFalse(StockMovement.objects.exists())

    def test_exit_to_exactly_zero_is_allowed(self):
        record_movement(item_id=self.tubes.pk, movement_type="exit", quantity=5, user=self.technician)
        self.tubes.refresh_from_db()
        self.assertEqual(self.tubes.quantity, 0)

    def test_negative_adjustment(self):
        record_movement(item_id=self.gloves.pk, movement_type="adjustment", quantity=-30, user=self.technician)
        self.gloves.refresh_from_db()
        self.assertEqual(self.gloves.quantity, 120)

    def test_movement_is_audited(self):
        movement = record_movement(
            item_id=self.gloves.pk,
            movement_type="exit",
            quantity=10,
            reason="Consumo",
            user=self.technician,
        )

        entry = AuditLog.objects.get(table_name="inventory_stock_movement", record_id=str(movement.pk))
        self.assertEqual(entry.new_data["quantity_before"], 150)
        self.assertEqual(entry.new_data["quantity_after"], 140)

    def test_unknown_item(self):
        with self.assertRaises(InventoryItem.DoesNotExist):
            record_movement(item_id=999999, movement_type="entry", quantity=1, user=self.technician)


class InventoryAPITest(InventoryTestMixin, TestCase):
    def test_list_with_low_stock_filter(self):
        response = self._client_for(self.technician).get("/api/inventory/items/", {"low_stock": "1"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([i["code"] for i in response.data], ["TUB-001"])
        self.assertTrue(response.data[0]["is_low_stock"])
        self.assertEqual(response.data[0]["total_value"], "12.50")

    def test_attendant_has_no_access(self):
        response = self._client_for(self.attendant).get("/api/inventory/items/")
        self.assertEqual(response.status_code, 403)

    def test_create_item(self):
        response = self._client_for(self.technician).post(
            "/api/inventory/items/",
            {"name": "Seringas 5ml", "code": "SER-005", "quantity": 45, "alert_level": 20, "unit_cost": "0.75"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertFalse(response.data["is_low_stock"])
        self.assertEqual(response.data["last_updated_by_email"], self.technician.email)
        self.assertTrue(AuditLog.objects.filter(table_name="inventory_item", action="INSERT").exists())

    def test_patch_cannot_change_quantity(self):
        response = self._client_for(self.technician).patch(
            f"/api/inventory/items/{self.tubes.pk}/", {"quantity": 500}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("quantity", response.data)

    def test_patch_other_fields(self):
        response = self._client_for(self.technician).patch(
            f"/api/inventory/items/{self.tubes.pk}/", {"alert_level": 3}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["is_low_stock"])

    def test_record_movement(self):
        response = self._client_for(self.technician).post(
            "/api/inventory/movements/",
            {"item_id": self.gloves.pk, "movement_type": "exit", "quantity": 10, "reason": "Consumo"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["quantity_after"], 140)
        self.assertEqual(response.data["user_email"], self.technician.email)

    def test_insufficient_stock_returns_400(self):
        response = self._client_for(self.technician).post(
            "/api/inventory/movements/",
            {"item_id": self.tubes.pk, "movement_type": "exit", "quantity": 50},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["available"], 5)

    def test_movements_filtered_by_item(self):
        record_movement(item_id=self.tubes.pk, movement_type="entry", quantity=1, user=self.technician)
        record_movement(item_id=self.gloves.pk, movement_type="entry", quantity=1, user=self.technician)

        response = self._client_for(self.technician).get("/api/inventory/movements/", {"item": self.tubes.pk})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([m["item"] for m in response.data], [self.tubes.pk])

    def test_item_with_movements_cannot_be_deleted(self):
        record_movement(item_id=self.tubes.pk, movement_type="entry", quantity=1, user=self.technician)

        response = self._client_for(self.technician).delete(f"/api/inventory/items/{self.tubes.pk}/")
        self.assertEqual(response.status_code, 409)

    def test_item_without_movements_can_be_deleted(self):
        response = self._client_for(self.technician).delete(f"/api/inventory/items/{self.gloves.pk}/")

        self.assertEqual(response.status_code, 204)
        self.assertTrue(AuditLog.objects.filter(table_name="inventory_item", action="DELETE").exists())


class InventorySeederTest(TestCase):
    databases = {"default"}

    def test_seed_creates_items_and_history_once(self):
        first = seed_inventory()
        second = seed_inventory()

        self.assertEqual(first["inventory_items"], len(DEMO_ITEMS))
        self.assertEqual(first["inventory_movements"], 3)
        self.assertEqual(second, {"inventory_items": 0, "inventory_movements": 0})
        self.assertEqual(InventoryItem.objects.get(code="LUV-PROC").quantity, 210)
        self.assertEqual(InventoryItem.objects.get(code="SER-005").quantity, 40)
