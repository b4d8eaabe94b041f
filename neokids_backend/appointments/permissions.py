from neokids_backend.core.permissions import (
    ALL_ROLES,
    ROLE_ADMIN,
    ROLE_ATTENDANT,
    ROLE_TECHNICIAN,
    RBACPermission,
)


class AppointmentPermission(RBACPermission):
    """RBAC for booking and the general status endpoint.

    - admin: full access
    - attendant: full access (front desk books and checks in)
    - technician: no access
    """

    read_roles = {ROLE_ADMIN, ROLE_ATTENDANT}
    write_roles = {ROLE_ADMIN, ROLE_ATTENDANT}


class LabBoardPermission(RBACPermission):
    """Every role sees the board and may move cards forward."""

    read_roles = ALL_ROLES
    write_roles = ALL_ROLES


class ExamResultPermission(RBACPermission):
    """Results are visible to every role; only admin and technician write them."""

    read_roles = ALL_ROLES
    write_roles = {ROLE_ADMIN, ROLE_TECHNICIAN}
