from neokids_backend.core.permissions import ALL_ROLES, ROLE_ADMIN, ROLE_ATTENDANT, RBACPermission


class DashboardPermission(RBACPermission):
    read_roles = ALL_ROLES
    write_roles = set()


class ReportPermission(RBACPermission):
    """Financial reports: admin and attendant."""

    read_roles = {ROLE_ADMIN, ROLE_ATTENDANT}
    write_roles = set()
