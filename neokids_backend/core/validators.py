"""Field validation shared by the patient and user serializers.

The rule engine mirrors what the registration forms expect: each field has a
``FieldRule`` and ``validate_field`` reports only the first failure. Fields
whose name mentions ``cpf``, ``email`` or ``phone``/``telefone`` get the
matching domain check automatically.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Mapping, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
NON_DIGITS_RE = re.compile(r'\D')

MAX_PATIENT_AGE = 18


def only_digits(value) -> str:
    return NON_DIGITS_RE.sub('', str(value or ''))


def _cpf_check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(weight_start, 1, -1)))
    check = 11 - (total % 11)
    return 0 if check >= 10 else check


def is_valid_cpf(value) -> bool:
    """Brazilian CPF check: 11 digits, not all equal, both check digits match."""
    cpf = only_digits(value)
    if len(cpf) != 11:
        return False
    if cpf == cpf[0] * 11:
        return False
    if _cpf_check_digit(cpf[:9], 10) != int(cpf[9]):
        return False
    return _cpf_check_digit(cpf[:10], 11) == int(cpf[10])


def is_valid_email(value) -> bool:
    return bool(EMAIL_RE.match(str(value or '')))


def is_valid_phone(value) -> bool:
    return len(only_digits(value)) in (10, 11)


def format_cpf(value) -> str:
    """000.000.000-00, or the bare digits when there are not exactly 11."""
    cpf = only_digits(value)
    if len(cpf) != 11:
        return cpf
    return f"{cpf[:3]}.{cpf[3:6]}.{cpf[6:9]}-{cpf[9:]}"


def format_phone(value) -> str:
    """(00) 00000-0000 for mobiles, (00) 0000-0000 for landlines."""
    phone = only_digits(value)
    if len(phone) == 11:
        return f"({phone[:2]}) {phone[2:7]}-{phone[7:]}"
    if len(phone) == 10:
        return f"({phone[:2]}) {phone[2:6]}-{phone[6:]}"
    return phone


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    custom: Optional[Callable[[str], Optional[str]]] = None
    message: Optional[str] = None


def validate_field(name: str, value, rule: Optional[FieldRule]) -> Optional[str]:
    """Return the first error message for ``value`` or None.

    Order: required, length, pattern, name-based domain check, custom.
    """
    if rule is None:
        return None

    text = '' if value is None else str(value)

    if rule.required and not text.strip():
        return rule.message or f'{name} é obrigatório'

    if not text.strip():
        return None

    if rule.min_length and len(text) < rule.min_length:
        return rule.message or f'{name} deve ter pelo menos {rule.min_length} caracteres'

    if rule.max_length and len(text) > rule.max_length:
        return rule.message or f'{name} deve ter no máximo {rule.max_length} caracteres'

    if rule.pattern and not re.search(rule.pattern, text):
        return rule.message or f'{name} tem formato inválido'

    lowered = name.lower()
    if 'cpf' in lowered and not is_valid_cpf(text):
        return 'CPF inválido'
    if 'email' in lowered and not is_valid_email(text):
        return 'Email inválido'
    if ('phone' in lowered or 'telefone' in lowered) and not is_valid_phone(text):
        return 'Telefone inválido'

    if rule.custom is not None:
        error = rule.custom(text)
        if error:
            return error

    return None


def validate_form(values: Mapping, rules: Mapping[str, FieldRule]) -> dict:
    """Validate every ruled field; returns {field: first_error}."""
    errors = {}
    for field, rule in rules.items():
        error = validate_field(field, values.get(field), rule)
        if error:
            errors[field] = error
    return errors


def age_on(birth_date: date, today: date) -> int:
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def check_pediatric_birth_date(value: str) -> Optional[str]:
    try:
        birth_date = parse_date(value) if isinstance(value, str) else value
    except ValueError:
        return 'Data de nascimento inválida'
    if birth_date is None:
        return 'Data de nascimento inválida'
    today = timezone.localdate()
    if birth_date > today:
        return 'Data de nascimento não pode ser futura'
    if age_on(birth_date, today) > MAX_PATIENT_AGE:
        return f'Paciente deve ter no máximo {MAX_PATIENT_AGE} anos'
    return None


# CPF and phone are accepted either formatted or as bare digits; the
# name-based domain checks cover their shape.
PATIENT_RULES = {
    'name': FieldRule(
        required=True,
        min_length=2,
        max_length=100,
        message='Nome deve ter entre 2 e 100 caracteres',
    ),
    'cpf': FieldRule(required=True),
    'email': FieldRule(
        pattern=EMAIL_RE.pattern,
        message='Email deve ter um formato válido',
    ),
    'phone': FieldRule(required=True),
    'address': FieldRule(
        required=True,
        min_length=10,
        max_length=200,
        message='Endereço deve ter entre 10 e 200 caracteres',
    ),
    'birth_date': FieldRule(required=True, custom=check_pediatric_birth_date),
    'responsible_name': FieldRule(required=True, min_length=2, max_length=100),
    'responsible_cpf': FieldRule(),
    'responsible_phone': FieldRule(),
}
