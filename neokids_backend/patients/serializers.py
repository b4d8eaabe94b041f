from collections.abc import Mapping

from rest_framework import serializers

from neokids_backend.core.validators import PATIENT_RULES, format_cpf, format_phone, only_digits, validate_form
from neokids_backend.patients.models import Patient

WRITE_FIELDS = [
    'name',
    'birth_date',
    'cpf',
    'phone',
    'email',
    'address',
    'responsible_name',
    'responsible_cpf',
    'responsible_phone',
    'special_alert',
]


class PatientReadSerializer(serializers.ModelSerializer):
    """Read-only serializer with display-formatted documents."""

    cpf_formatted = serializers.SerializerMethodField()
    phone_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Patient
        fields = [
            'id',
            *WRITE_FIELDS,
            'cpf_formatted',
            'phone_formatted',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_cpf_formatted(self, obj):
        return format_cpf(obj.cpf)

    def get_phone_formatted(self, obj):
        return format_phone(obj.phone)


class PatientWriteSerializer(serializers.ModelSerializer):
    """Create/update with the clinic's field rules.

    Each invalid field reports only its first failing rule. CPF and phone
    numbers may arrive formatted; they are stored as digits.
    """

    class Meta:
        model = Patient
        fields = WRITE_FIELDS
        extra_kwargs = {
            # Formatted input ("000.000.000-00") is longer than the stored digits.
            'cpf': {'max_length': 14, 'validators': []},
            'phone': {'max_length': 20},
            'responsible_cpf': {'max_length': 14},
            'responsible_phone': {'max_length': 20},
        }

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            return super().to_internal_value(data)
        rules = PATIENT_RULES
        if self.partial:
            rules = {field: rule for field, rule in PATIENT_RULES.items() if field in data}
        errors = validate_form(data, rules)
        if errors:
            raise serializers.ValidationError({field: [message] for field, message in errors.items()})
        return super().to_internal_value(data)

    def validate_cpf(self, value):
        cpf = only_digits(value)
        if self.instance is not None:
            if cpf != self.instance.cpf:
                raise serializers.ValidationError('CPF cannot be changed after registration.')
            return cpf
        if Patient.objects.filter(cpf=cpf).exists():
            raise serializers.ValidationError('A patient with this CPF already exists.')
        return cpf

    def validate_phone(self, value):
        return only_digits(value)

    def validate_responsible_cpf(self, value):
        return only_digits(value)

    def validate_responsible_phone(self, value):
        return only_digits(value)


class PatientSummarySerializer(serializers.ModelSerializer):
    """Compact patient shown on appointment and lab cards."""

    class Meta:
        model = Patient
        fields = ['id', 'name', 'cpf', 'birth_date', 'responsible_name', 'special_alert']
        read_only_fields = fields
