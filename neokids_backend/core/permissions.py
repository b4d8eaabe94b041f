"""Core permissions for RBAC (Role-Based Access Control).

Every API permission derives from RBACPermission and declares which roles may
read (GET/HEAD/OPTIONS) and which may write (POST/PUT/PATCH/DELETE).

Roles: admin, attendant, technician
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

ROLE_ADMIN = "admin"
ROLE_ATTENDANT = "attendant"
ROLE_TECHNICIAN = "technician"

ROLE_LABELS = {
    ROLE_ADMIN: "Administrador",
    ROLE_ATTENDANT: "Atendente",
    ROLE_TECHNICIAN: "Técnico",
}

ALL_ROLES = {ROLE_ADMIN, ROLE_ATTENDANT, ROLE_TECHNICIAN}


class RBACPermission(BasePermission):
    """Base class for RBAC permissions with read_roles/write_roles pattern.

    Subclasses should define:
    - read_roles: set of role names that can perform GET/HEAD/OPTIONS
    - write_roles: set of role names that can perform POST/PUT/PATCH/DELETE

    Example:
        class MyPermission(RBACPermission):
            read_roles = {"admin", "attendant"}
            write_roles = {"admin"}
    """

    read_roles: set = set()
    write_roles: set = set()

    def _role_name(self, request):
        user = getattr(request, "user", None)
        role = getattr(user, "role", None)
        return getattr(role, "name", None)

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        role_name = self._role_name(request)
        if not role_name:
            return False

        if request.method in SAFE_METHODS:
            return role_name in self.read_roles

        return role_name in self.write_roles


class AdminOnlyPermission(RBACPermission):
    """Audit log, settings writes and user administration."""

    read_roles = {ROLE_ADMIN}
    write_roles = {ROLE_ADMIN}


class SystemSettingPermission(RBACPermission):
    read_roles = ALL_ROLES
    write_roles = {ROLE_ADMIN}
