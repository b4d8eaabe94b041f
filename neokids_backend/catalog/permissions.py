from neokids_backend.core.permissions import ALL_ROLES, RBACPermission, ROLE_ADMIN


class ServicePermission(RBACPermission):
    """Every role reads the catalog; only admins change prices."""

    read_roles = ALL_ROLES
    write_roles = {ROLE_ADMIN}
