from django.contrib.auth import get_user_model
from django.db import transaction

from .models import Role, SystemSetting
from .permissions import ROLE_ADMIN, ROLE_ATTENDANT, ROLE_LABELS, ROLE_TECHNICIAN

User = get_user_model()

DEMO_USERS = [
    # email, password, first name, last name, role
    ("admin@neokids.com", "admin123", "Administrador", "Neokids", ROLE_ADMIN),
    ("atendente@neokids.com", "atendente123", "Maria", "Silva", ROLE_ATTENDANT),
    ("tecnico@neokids.com", "tecnico123", "João", "Santos", ROLE_TECHNICIAN),
]

DEFAULT_SETTINGS = [
    # key, category, value, type, options, description
    ("clinic_name", "clinic", "Clínica Neokids", SystemSetting.TYPE_TEXT, [],
     "Nome da clínica exibido no sistema"),
    ("clinic_address", "clinic", "Rua das Crianças, 123 - São Paulo, SP", SystemSetting.TYPE_TEXT, [],
     "Endereço da clínica"),
    ("clinic_phone", "clinic", "(11) 1234-5678", SystemSetting.TYPE_TEXT, [],
     "Telefone principal da clínica"),
    ("enable_email_notifications", "notifications", True, SystemSetting.TYPE_BOOLEAN, [],
     "Ativar notificações por email"),
    ("session_timeout", "security", 480, SystemSetting.TYPE_NUMBER, [],
     "Tempo limite da sessão em minutos"),
    ("max_appointments_per_day", "scheduling", 50, SystemSetting.TYPE_NUMBER, [],
     "Número máximo de atendimentos por dia"),
    ("default_currency", "billing", "BRL", SystemSetting.TYPE_SELECT, ["BRL", "USD", "EUR"],
     "Moeda padrão do sistema"),
]


def seed_core(flush: bool = False) -> dict:
    """
    Seeds:
    - roles
    - demo users (one per role)
    - default system settings

    With flush=True the demo users are recreated and settings reset to their
    defaults. Audit entries are never touched.
    """
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            User.objects.filter(email__in=[u[0] for u in DEMO_USERS]).delete()
            SystemSetting.objects.all().delete()

        roles = seed_roles()
        stats["core_roles"] = len(roles)

        users = _seed_users(roles)
        stats["core_users"] = len(users)

        stats["core_settings"] = seed_settings()

    return stats


def seed_roles() -> dict[str, Role]:
    roles = {}
    for name, label in ROLE_LABELS.items():
        role, _created = Role.objects.get_or_create(name=name, defaults={"label": label})
        roles[name] = role
    return roles


def _seed_users(roles: dict[str, Role]) -> list:
    users = []
    for email, password, first_name, last_name, role_name in DEMO_USERS:
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
        user.role = roles[role_name]
        user.is_staff = role_name == ROLE_ADMIN
        user.save()
        users.append(user)
    return users


def seed_settings() -> int:
    created = 0
    for key, category, value, value_type, options, description in DEFAULT_SETTINGS:
        _setting, was_created = SystemSetting.objects.get_or_create(
            key=key,
            defaults={
                "category": category,
                "value": value,
                "value_type": value_type,
                "options": options,
                "description": description,
            },
        )
        created += int(was_created)
    return created
