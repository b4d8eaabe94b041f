from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import InventoryItem, StockMovement
from .services import record_movement

User = get_user_model()

DEMO_ITEMS = [
    {
        "name": "Tubos de coleta EDTA",
        "code": "TUB-001",
        "category": "Material de Coleta",
        "description": "Tubos de coleta a vácuo com EDTA para hemogramas",
        "quantity": 5,
        "unit": "un",
        "alert_level": 10,
        "unit_cost": Decimal("2.50"),
        "supplier": "MedSupply Ltda",
        "location": "Almoxarifado A1",
        "expiration_date": date(2027, 12, 31),
    },
    {
        "name": "Seringas 5ml",
        "code": "SER-005",
        "category": "Material de Coleta",
        "description": "Seringas descartáveis estéreis de 5ml",
        "quantity": 45,
        "unit": "un",
        "alert_level": 20,
        "unit_cost": Decimal("0.75"),
        "supplier": "Descartáveis Med",
        "location": "Almoxarifado B2",
        "expiration_date": date(2028, 8, 15),
    },
    {
        "name": "Reagente Hemoglobina",
        "code": "REA-HGB",
        "category": "Reagentes",
        "description": "Reagente para dosagem de hemoglobina",
        "quantity": 3,
        "unit": "frasco",
        "alert_level": 5,
        "unit_cost": Decimal("85.00"),
        "supplier": "BioReagentes S.A.",
        "location": "Refrigerador R1",
        "expiration_date": date(2027, 3, 20),
    },
    {
        "name": "Luvas de Procedimento",
        "code": "LUV-PROC",
        "category": "EPI",
        "description": "Luvas de procedimento não cirúrgico, tamanho M",
        "quantity": 150,
        "unit": "par",
        "alert_level": 50,
        "unit_cost": Decimal("0.45"),
        "supplier": "ProteEPI",
        "location": "Almoxarifado C1",
        "expiration_date": date(2029, 1, 10),
    },
    {
        "name": "Lâminas para Microscopia",
        "code": "LAM-MICRO",
        "category": "Material Laboratorial",
        "description": "Lâminas de vidro para microscopia, caixa com 50 unidades",
        "quantity": 8,
        "unit": "cx",
        "alert_level": 15,
        "unit_cost": Decimal("12.00"),
        "supplier": "LabGlass",
        "location": "Prateleira P3",
        "expiration_date": None,
    },
]

# code, type, quantity, reason
DEMO_MOVEMENTS = [
    ("LUV-PROC", StockMovement.TYPE_ENTRY, 100, "Reposição mensal"),
    ("LUV-PROC", StockMovement.TYPE_EXIT, 40, "Consumo da semana"),
    ("SER-005", StockMovement.TYPE_EXIT, 5, "Coletas do dia"),
]


def seed_inventory(flush: bool = False) -> dict:
    """Creates the demo stock items and, for freshly created items, a short
    movement history recorded through the regular service.
    """
    codes = [item["code"] for item in DEMO_ITEMS]

    with transaction.atomic():
        if flush:
            StockMovement.objects.filter(item__code__in=codes).delete()
            InventoryItem.objects.filter(code__in=codes).delete()

        created_codes = set()
        for data in DEMO_ITEMS:
            defaults = {k: v for k, v in data.items() if k != "code"}
            _item, was_created = InventoryItem.objects.get_or_create(code=data["code"], defaults=defaults)
            if was_created:
                created_codes.add(data["code"])

        actor = User.objects.filter(email="tecnico@neokids.com").first()
        movements = 0
        for code, movement_type, quantity, reason in DEMO_MOVEMENTS:
            if code not in created_codes:
                continue
            item = InventoryItem.objects.get(code=code)
            record_movement(
                item_id=item.pk,
                movement_type=movement_type,
                quantity=quantity,
                reason=reason,
                user=actor,
            )
            movements += 1

    return {"inventory_items": len(created_codes), "inventory_movements": movements}
