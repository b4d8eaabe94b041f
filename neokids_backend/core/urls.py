"""Core app URLs.

Prefix: /api/
Routes:
    GET   /api/health/          - Health check (no auth)
    POST  /api/auth/login/      - JWT token obtain with user/role info
    POST  /api/auth/refresh/    - JWT token refresh
    GET   /api/auth/me/         - Current user info
    GET   /api/audit-logs/      - Audit trail (admin)
    GET   /api/settings/        - System settings
    PATCH /api/settings/<key>/  - Update one setting (admin)
    POST  /api/admin/users/     - User administration actions (admin)
"""

from django.urls import path

from neokids_backend.core.views import (
    health,
    AuditLogListView,
    LoginView,
    MeView,
    RefreshView,
    SystemSettingDetailView,
    SystemSettingListView,
    UserManagementView,
)

app_name = 'core'

urlpatterns = [
    path('health/', health, name='health'),

    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/refresh/', RefreshView.as_view(), name='refresh'),
    path('auth/me/', MeView.as_view(), name='me'),

    path('audit-logs/', AuditLogListView.as_view(), name='audit-log-list'),
    path('settings/', SystemSettingListView.as_view(), name='setting-list'),
    path('settings/<str:key>/', SystemSettingDetailView.as_view(), name='setting-detail'),
    path('admin/users/', UserManagementView.as_view(), name='user-management'),
]
