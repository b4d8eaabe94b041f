"""Core app views.

Contains:
- health: Health check endpoint
- LoginView / RefreshView / MeView: JWT authentication
- AuditLogListView: paginated audit trail (admin)
- SystemSettingListView / SystemSettingDetailView: runtime settings
- UserManagementView: action-dispatched user administration (admin)
"""

import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail
from django.db import connection
from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from rest_framework_simplejwt.tokens import RefreshToken

from neokids_backend.core.models import AuditLog, SystemSetting, User
from neokids_backend.core.permissions import AdminOnlyPermission, SystemSettingPermission
from neokids_backend.core.serializers import (
    AuditLogSerializer,
    LoginSerializer,
    RefreshSerializer,
    SystemSettingSerializer,
    SystemSettingUpdateSerializer,
    UserCreateSerializer,
    UserDeleteSerializer,
    UserInviteSerializer,
    UserRoleUpdateSerializer,
    UserSerializer,
)
from neokids_backend.core.utils import log_audit, snapshot

logger = logging.getLogger(__name__)

# Audit table name used for account changes.
USERS_TABLE = 'auth.users'
USER_SNAPSHOT_FIELDS = ['id', 'username', 'email', 'first_name', 'last_name', 'is_active', 'role']


def health(request):
    """Health check endpoint - no authentication required."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1;')
    except Exception as exc:
        logger.exception('Health check failed')
        return JsonResponse({'status': 'error', 'detail': str(exc)}, status=503)

    return JsonResponse({'status': 'ok'})


class LoginView(APIView):
    """Obtain JWT access and refresh tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"user": {...}, "access": "...", "refresh": "..."}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']

        refresh = RefreshToken.for_user(user)
        # Add role to token claims
        refresh['role'] = user.role_name
        access = refresh.access_token

        return Response(
            {
                'user': UserSerializer(user).data,
                'access': str(access),
                'refresh': str(refresh),
            },
            status=status.HTTP_200_OK,
        )


class RefreshView(APIView):
    """Refresh JWT access token.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        refresh = RefreshToken(serializer.validated_data['refresh'])
        return Response({'access': str(refresh.access_token)}, status=status.HTTP_200_OK)


class MeView(APIView):
    """GET /api/auth/me/ - current user with role."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)


# -----------------------------------------------------------------------------
# Audit log
# -----------------------------------------------------------------------------


class AuditLogPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class AuditLogListView(generics.ListAPIView):
    """GET /api/audit-logs/?table_name=&page=&page_size= (newest first)."""

    permission_classes = [AdminOnlyPermission]
    serializer_class = AuditLogSerializer
    pagination_class = AuditLogPagination

    def get_queryset(self):
        qs = AuditLog.objects.select_related('user').order_by('-timestamp', '-id')
        table_name = self.request.query_params.get('table_name')
        if table_name:
            qs = qs.filter(table_name=table_name)
        return qs


# -----------------------------------------------------------------------------
# System settings
# -----------------------------------------------------------------------------


class SystemSettingListView(generics.ListAPIView):
    permission_classes = [SystemSettingPermission]
    serializer_class = SystemSettingSerializer
    queryset = SystemSetting.objects.select_related('updated_by').all()


class SystemSettingDetailView(generics.GenericAPIView):
    """GET/PATCH /api/settings/<key>/"""

    permission_classes = [SystemSettingPermission]
    serializer_class = SystemSettingSerializer
    queryset = SystemSetting.objects.all()
    lookup_field = 'key'

    def get(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.get_object()).data)

    def patch(self, request, *args, **kwargs):
        setting = self.get_object()
        serializer = SystemSettingUpdateSerializer(data=request.data, context={'setting': setting})
        serializer.is_valid(raise_exception=True)

        old_data = {'key': setting.key, 'value': setting.value}
        setting.value = serializer.validated_data['value']
        setting.updated_by = request.user
        setting.save(update_fields=['value', 'updated_by', 'updated_at'])

        log_audit(
            request.user,
            AuditLog.ACTION_UPDATE,
            setting,
            old_data=old_data,
            new_data={'key': setting.key, 'value': setting.value},
        )
        logger.info('Setting %s updated by user_id=%s', setting.key, request.user.id)
        return Response(self.get_serializer(setting).data)


# -----------------------------------------------------------------------------
# User administration
# -----------------------------------------------------------------------------


def _split_name(name):
    first, _, last = (name or '').strip().partition(' ')
    return first, last.strip()


class UserManagementView(APIView):
    """POST /api/admin/users/ with {"action": ..., "payload": {...}}.

    Actions: list-users, update-user-role, delete-user, invite-user,
    create-user.
    """

    permission_classes = [AdminOnlyPermission]

    def post(self, request, *args, **kwargs):
        action = request.data.get('action')
        payload = request.data.get('payload') or {}

        handler = self.handlers.get(action)
        if handler is None:
            return Response(
                {'detail': f'Unknown action: {action}'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not isinstance(payload, dict):
            return Response({'detail': 'payload must be an object.'}, status=status.HTTP_400_BAD_REQUEST)
        return handler(self, request, payload)

    def list_users(self, request, payload):
        users = User.objects.select_related('role').order_by('email')
        return Response({'users': UserSerializer(users, many=True).data})

    def update_user_role(self, request, payload):
        serializer = UserRoleUpdateSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        user = get_object_or_404(User, pk=serializer.validated_data['user_id'])
        role = serializer.validated_data['role']

        old_role = user.role_name
        user.role = role
        user.save(update_fields=['role'])

        log_audit(
            request.user,
            AuditLog.ACTION_UPDATE,
            table_name=USERS_TABLE,
            record_id=user.pk,
            old_data={'role': old_role},
            new_data={'role': role.name},
        )
        logger.info('User %s role changed %s -> %s', user.pk, old_role, role.name)
        return Response({'user': UserSerializer(user).data})

    def delete_user(self, request, payload):
        serializer = UserDeleteSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        user = get_object_or_404(User, pk=serializer.validated_data['user_id'])

        if user.pk == request.user.pk:
            return Response(
                {'detail': 'You cannot delete your own account.'},
                status=status.HTTP_400_BAD_REQUEST,
            )

        old_data = snapshot(user, fields=USER_SNAPSHOT_FIELDS)
        record_id = user.pk
        user.delete()

        log_audit(
            request.user,
            AuditLog.ACTION_DELETE,
            table_name=USERS_TABLE,
            record_id=record_id,
            old_data=old_data,
        )
        logger.info('User %s deleted by user_id=%s', record_id, request.user.id)
        return Response({'success': True})

    def invite_user(self, request, payload):
        serializer = UserInviteSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']

        user = User.objects.create_user(
            username=email,
            email=email,
            password=None,
            role=serializer.validated_data['role'],
        )

        log_audit(
            request.user,
            AuditLog.ACTION_INSERT,
            table_name=USERS_TABLE,
            record_id=user.pk,
            new_data=snapshot(user, fields=USER_SNAPSHOT_FIELDS),
        )

        email_sent = True
        try:
            send_mail(
                subject='Convite - Clínica Neokids',
                message=(
                    'Você foi convidado para acessar o sistema da Clínica Neokids.\n'
                    f'Defina sua senha em: {settings.INVITE_URL}?email={email}'
                ),
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[email],
            )
        except (smtplib.SMTPException, OSError):
            email_sent = False
            logger.exception('Invitation email to %s failed', email)

        return Response(
            {'user': UserSerializer(user).data, 'email_sent': email_sent},
            status=status.HTTP_201_CREATED,
        )

    def create_user(self, request, payload):
        serializer = UserCreateSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        first_name, last_name = _split_name(data['name'])

        user = User.objects.create_user(
            username=data['email'],
            email=data['email'],
            password=data['password'],
            first_name=first_name,
            last_name=last_name,
            role=data['role'],
        )

        log_audit(
            request.user,
            AuditLog.ACTION_INSERT,
            table_name=USERS_TABLE,
            record_id=user.pk,
            new_data=snapshot(user, fields=USER_SNAPSHOT_FIELDS),
        )
        logger.info('User %s created by user_id=%s', user.pk, request.user.id)
        return Response({'user': UserSerializer(user).data}, status=status.HTTP_201_CREATED)

    handlers = {
        'list-users': list_users,
        'update-user-role': update_user_role,
        'delete-user': delete_user,
        'invite-user': invite_user,
        'create-user': create_user,
    }
