from neokids_backend.core.permissions import RBACPermission, ROLE_ADMIN, ROLE_TECHNICIAN


class InventoryPermission(RBACPermission):
    """Stock is handled by the lab: admin and technician only."""

    read_roles = {ROLE_ADMIN, ROLE_TECHNICIAN}
    write_roles = {ROLE_ADMIN, ROLE_TECHNICIAN}
