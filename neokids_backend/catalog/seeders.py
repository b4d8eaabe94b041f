from decimal import Decimal

from django.db import transaction

from .models import Service

DEMO_SERVICES = [
    {
        "name": "Hemograma Completo",
        "category": "Análises Clínicas",
        "code": "HG001",
        "base_price": Decimal("45.00"),
        "operational_cost": Decimal("12.00"),
        "estimated_time": "2-4 horas",
        "instructions": "Não é necessário jejum. Evitar exercícios físicos intensos 24h antes.",
    },
    {
        "name": "Glicemia de Jejum",
        "category": "Análises Clínicas",
        "code": "GL001",
        "base_price": Decimal("25.00"),
        "operational_cost": Decimal("6.00"),
        "estimated_time": "2 horas",
        "instructions": "Jejum de 8 a 12 horas. Apenas água é permitida.",
    },
    {
        "name": "Radiografia de Tórax",
        "category": "Exames de Imagem",
        "code": "RX001",
        "base_price": Decimal("120.00"),
        "operational_cost": Decimal("35.00"),
        "estimated_time": "30 minutos",
        "instructions": "Remover objetos metálicos. Evitar roupas com metais.",
    },
    {
        "name": "Ultrassom Abdominal",
        "category": "Exames de Imagem",
        "code": "US001",
        "base_price": Decimal("180.00"),
        "operational_cost": Decimal("50.00"),
        "estimated_time": "24 horas",
        "instructions": "Jejum de 8 horas. Beber 4 copos de água 1 hora antes do exame.",
    },
    {
        "name": "Vacina Tríplice Viral",
        "category": "Vacinas",
        "code": "VT001",
        "base_price": Decimal("85.00"),
        "operational_cost": Decimal("65.00"),
        "estimated_time": "Imediato",
        "instructions": "Criança deve estar saudável. Informar sobre alergias.",
    },
]


def seed_catalog(flush: bool = False) -> dict:
    """Creates the demo services. Existing codes are left as they are.

    flush only removes demo services no appointment refers to.
    """
    with transaction.atomic():
        if flush:
            Service.objects.filter(
                code__in=[s["code"] for s in DEMO_SERVICES],
                appointments__isnull=True,
            ).delete()

        created = 0
        for data in DEMO_SERVICES:
            defaults = {k: v for k, v in data.items() if k != "code"}
            _service, was_created = Service.objects.get_or_create(code=data["code"], defaults=defaults)
            created += int(was_created)

    return {"catalog_services": created}
