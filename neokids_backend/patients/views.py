import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404

from rest_framework import generics
from rest_framework.response import Response

from neokids_backend.appointments.models import Appointment
from neokids_backend.appointments.serializers import AppointmentDetailSerializer
from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit, snapshot
from neokids_backend.core.validators import only_digits
from neokids_backend.patients.models import Patient
from neokids_backend.patients.permissions import PatientPermission
from neokids_backend.patients.serializers import PatientReadSerializer, PatientWriteSerializer

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class PatientListCreateView(generics.ListCreateAPIView):
    """List patients (optionally ?search=) or register a new one."""

    permission_classes = [PatientPermission]

    def get_queryset(self):
        qs = Patient.objects.all()
        search = self.request.query_params.get('search')
        if search is None:
            return qs

        search = search.strip()
        if len(search) < MIN_SEARCH_LENGTH:
            return qs.none()

        condition = Q(name__icontains=search)
        digits = only_digits(search)
        if digits:
            condition |= Q(cpf__contains=digits) | Q(phone__contains=digits)
        return qs.filter(condition)

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PatientWriteSerializer
        return PatientReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        patient = serializer.save(created_by=request.user)

        log_audit(request.user, AuditLog.ACTION_INSERT, patient, new_data=snapshot(patient))
        logger.info('Patient %s registered by user_id=%s', patient.pk, request.user.id)
        return Response(PatientReadSerializer(patient).data, status=201)


class PatientRetrieveUpdateView(generics.RetrieveUpdateAPIView):
    """Retrieve or update a patient. The CPF cannot change."""

    permission_classes = [PatientPermission]
    queryset = Patient.objects.all()

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return PatientWriteSerializer
        return PatientReadSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        patient = self.get_object()
        old_data = snapshot(patient)

        serializer = self.get_serializer(patient, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        patient = serializer.save()

        log_audit(request.user, AuditLog.ACTION_UPDATE, patient, old_data=old_data, new_data=snapshot(patient))
        return Response(PatientReadSerializer(patient).data)


class PatientHistoryView(generics.GenericAPIView):
    """GET /api/patients/<pk>/history/ - appointments, newest first."""

    permission_classes = [PatientPermission]

    def get(self, request, pk, *args, **kwargs):
        patient = get_object_or_404(Patient, pk=pk)
        appointments = (
            Appointment.objects.filter(patient=patient)
            .select_related('patient')
            .prefetch_related('services', 'exam_results__service')
            .order_by('-appointment_date', '-id')
        )
        return Response(
            {
                'patient': PatientReadSerializer(patient).data,
                'appointments': AppointmentDetailSerializer(appointments, many=True).data,
            }
        )
