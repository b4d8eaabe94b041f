"""Serializers for appointments, the lab board and exam results.

Read serializers expose the derived total; write serializers only check
shape. Business rules live in ``appointments.services``.
"""

from rest_framework import serializers

from neokids_backend.appointments.models import Appointment, ExamResult
from neokids_backend.appointments.services import next_lab_status
from neokids_backend.catalog.serializers import ServiceSummarySerializer
from neokids_backend.patients.serializers import PatientSummarySerializer


# -----------------------------------------------------------------------------
# Read
# -----------------------------------------------------------------------------


class ExamResultSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source='service.name', read_only=True)
    service_code = serializers.CharField(source='service.code', read_only=True)
    updated_by_email = serializers.CharField(source='updated_by.email', read_only=True, default=None)

    class Meta:
        model = ExamResult
        fields = [
            'id',
            'appointment',
            'service',
            'service_name',
            'service_code',
            'patient',
            'result_data',
            'notes',
            'status',
            'issued_at',
            'updated_by_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AppointmentSerializer(serializers.ModelSerializer):
    patient = PatientSummarySerializer(read_only=True)
    services = ServiceSummarySerializer(many=True, read_only=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'patient',
            'services',
            'appointment_date',
            'status',
            'payment_method',
            'insurance_type',
            'notes',
            'total_amount',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AppointmentDetailSerializer(AppointmentSerializer):
    """Appointment with its exam results (patient history, detail view)."""

    exam_results = ExamResultSerializer(many=True, read_only=True)

    class Meta(AppointmentSerializer.Meta):
        fields = AppointmentSerializer.Meta.fields + ['exam_results']
        read_only_fields = fields


class LabAppointmentSerializer(AppointmentSerializer):
    """Kanban card: the appointment plus the one status it may move to."""

    next_status = serializers.SerializerMethodField()

    class Meta(AppointmentSerializer.Meta):
        fields = AppointmentSerializer.Meta.fields + ['next_status']
        read_only_fields = fields

    def get_next_status(self, obj):
        return next_lab_status(obj.status)


# -----------------------------------------------------------------------------
# Write
# -----------------------------------------------------------------------------


class AppointmentCreateSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField(min_value=1)
    service_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )
    payment_method = serializers.ChoiceField(choices=Appointment.PAYMENT_METHOD_CHOICES)
    insurance_type = serializers.ChoiceField(
        choices=Appointment.INSURANCE_TYPE_CHOICES,
        default=Appointment.INSURANCE_PRIVATE,
    )
    appointment_date = serializers.DateTimeField(required=False)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=32)


class ExamResultUpsertSerializer(serializers.Serializer):
    appointment_id = serializers.IntegerField(min_value=1)
    service_id = serializers.IntegerField(min_value=1)
    patient_id = serializers.IntegerField(min_value=1)
    result_data = serializers.JSONField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
