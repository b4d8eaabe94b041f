import logging

from django.db.models import ProtectedError

from rest_framework import generics, status
from rest_framework.response import Response

from neokids_backend.catalog.models import Service
from neokids_backend.catalog.permissions import ServicePermission
from neokids_backend.catalog.serializers import ServiceReadSerializer, ServiceWriteSerializer
from neokids_backend.core.models import AuditLog
from neokids_backend.core.utils import log_audit, snapshot

logger = logging.getLogger(__name__)


class ServiceListCreateView(generics.ListCreateAPIView):
    """GET/POST /api/services/ (?active=1 for bookable services only)."""

    permission_classes = [ServicePermission]

    def get_queryset(self):
        qs = Service.objects.order_by('name', 'id')
        active = self.request.query_params.get('active')
        if active in ('1', 'true', 'True'):
            qs = qs.filter(active=True)
        elif active in ('0', 'false', 'False'):
            qs = qs.filter(active=False)
        return qs

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return ServiceWriteSerializer
        return ServiceReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = serializer.save()

        log_audit(request.user, AuditLog.ACTION_INSERT, service, new_data=snapshot(service))
        logger.info('Service %s (%s) created', service.pk, service.code)
        return Response(ServiceReadSerializer(service).data, status=status.HTTP_201_CREATED)


class ServiceDetailView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/DELETE /api/services/<pk>/

    A service still referenced by appointments cannot be deleted (409);
    deactivate it instead.
    """

    permission_classes = [ServicePermission]
    queryset = Service.objects.all()

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return ServiceWriteSerializer
        return ServiceReadSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        service = self.get_object()
        old_data = snapshot(service)

        serializer = self.get_serializer(service, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        service = serializer.save()

        log_audit(request.user, AuditLog.ACTION_UPDATE, service, old_data=old_data, new_data=snapshot(service))
        return Response(ServiceReadSerializer(service).data)

    def destroy(self, request, *args, **kwargs):
        service = self.get_object()
        old_data = snapshot(service)
        record_id = service.pk

        try:
            service.delete()
        except ProtectedError:
            logger.warning('Refused to delete service %s: still referenced by appointments', record_id)
            return Response(
                {'detail': 'Service is linked to appointments; deactivate it instead.'},
                status=status.HTTP_409_CONFLICT,
            )

        log_audit(
            request.user,
            AuditLog.ACTION_DELETE,
            table_name=Service._meta.db_table,
            record_id=record_id,
            old_data=old_data,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
