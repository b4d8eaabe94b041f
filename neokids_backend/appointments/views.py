import logging
from datetime import datetime

from rest_framework import generics, status
from rest_framework.response import Response

from neokids_backend.appointments.exceptions import (
    InvalidBookingData,
    InvalidStatusTransition,
    ResultWriteError,
)
from neokids_backend.appointments.models import Appointment, ExamResult
from neokids_backend.appointments.permissions import (
    AppointmentPermission,
    ExamResultPermission,
    LabBoardPermission,
)
from neokids_backend.appointments.serializers import (
    AppointmentCreateSerializer,
    AppointmentDetailSerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
    ExamResultSerializer,
    ExamResultUpsertSerializer,
    LabAppointmentSerializer,
)
from neokids_backend.appointments.services import (
    advance_lab_status,
    create_appointment_with_services,
    get_lab_appointments,
    update_appointment_status,
    upsert_exam_result,
)

logger = logging.getLogger(__name__)

NOT_FOUND = {'detail': 'Not found.'}


class AppointmentListCreateView(generics.ListCreateAPIView):
    """GET/POST /api/appointments/

    Filters: ?status=, ?patient=<id>, ?date=YYYY-MM-DD (clinic-local day).
    """

    permission_classes = [AppointmentPermission]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return AppointmentCreateSerializer
        return AppointmentSerializer

    def get_queryset(self):
        qs = Appointment.objects.select_related('patient').prefetch_related('services')
        params = self.request.query_params

        status_filter = params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)

        patient_id = params.get('patient')
        if patient_id and patient_id.isdigit():
            qs = qs.filter(patient_id=int(patient_id))

        day = params.get('date')
        if day:
            try:
                day = datetime.strptime(day, '%Y-%m-%d').date()
            except ValueError:
                return qs.none()
            qs = qs.filter(appointment_date__date=day)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = create_appointment_with_services(data=dict(serializer.validated_data), user=request.user)
        except InvalidBookingData as e:
            logger.warning('Booking rejected for user_id=%s: %s', request.user.id, e)
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


class AppointmentDetailView(generics.RetrieveAPIView):
    """GET /api/appointments/<pk>/ with exam results."""

    permission_classes = [AppointmentPermission]
    serializer_class = AppointmentDetailSerializer
    queryset = Appointment.objects.select_related('patient').prefetch_related(
        'services', 'exam_results__service', 'exam_results__updated_by'
    )


class AppointmentStatusView(generics.GenericAPIView):
    """PATCH /api/appointments/<pk>/status/ - check-in, cancel, no-show, ..."""

    permission_classes = [AppointmentPermission]
    serializer_class = AppointmentStatusSerializer

    def patch(self, request, pk: int, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = update_appointment_status(
                appointment_id=pk,
                status=serializer.validated_data['status'],
                user=request.user,
            )
        except Appointment.DoesNotExist:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidStatusTransition as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_200_OK)


class LabAppointmentListView(generics.ListAPIView):
    """GET /api/lab/appointments/ - cards on the lab Kanban board."""

    permission_classes = [LabBoardPermission]
    serializer_class = LabAppointmentSerializer
    pagination_class = None

    def get_queryset(self):
        return get_lab_appointments()


class LabAdvanceView(generics.GenericAPIView):
    """POST /api/lab/appointments/<pk>/advance/ with {"status": <next status>}."""

    permission_classes = [LabBoardPermission]
    serializer_class = AppointmentStatusSerializer

    def post(self, request, pk: int, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = advance_lab_status(
                appointment_id=pk,
                status=serializer.validated_data['status'],
                user=request.user,
            )
        except Appointment.DoesNotExist:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidStatusTransition as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(LabAppointmentSerializer(appointment).data, status=status.HTTP_200_OK)


def _parse_appointment_ids(request):
    value = request.query_params.get('appointment_ids')
    if not value:
        return None, Response(
            {'detail': 'Provide appointment_ids as comma-separated list.'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    try:
        ids = [int(x) for x in value.split(',') if x.strip()]
    except ValueError:
        return None, Response({'detail': 'appointment_ids must be integers.'}, status=status.HTTP_400_BAD_REQUEST)
    if not ids:
        return None, Response({'detail': 'appointment_ids cannot be empty.'}, status=status.HTTP_400_BAD_REQUEST)
    return ids, None


class ExamResultView(generics.GenericAPIView):
    """GET /api/exam-results/?appointment_ids=1,2 and PUT /api/exam-results/ (upsert)."""

    permission_classes = [ExamResultPermission]

    def get_serializer_class(self):
        if self.request.method == 'PUT':
            return ExamResultUpsertSerializer
        return ExamResultSerializer

    def get(self, request, *args, **kwargs):
        ids, error = _parse_appointment_ids(request)
        if error is not None:
            return error

        results = (
            ExamResult.objects.filter(appointment_id__in=ids)
            .select_related('service', 'updated_by')
            .order_by('appointment_id', 'id')
        )
        return Response(ExamResultSerializer(results, many=True).data, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = upsert_exam_result(
                appointment_id=data['appointment_id'],
                service_id=data['service_id'],
                patient_id=data['patient_id'],
                result_data=data['result_data'],
                notes=data.get('notes', ''),
                status=data.get('status'),
                user=request.user,
            )
        except Appointment.DoesNotExist:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ResultWriteError as e:
            code = status.HTTP_401_UNAUTHORIZED if e.unauthenticated else status.HTTP_400_BAD_REQUEST
            return Response(e.to_dict(), status=code)

        return Response(ExamResultSerializer(result).data, status=status.HTTP_200_OK)
