from neokids_backend.core.permissions import RBACPermission, ROLE_ADMIN, ROLE_ATTENDANT


class PatientPermission(RBACPermission):
    """RBAC for patient endpoints.

    - admin: full access
    - attendant: full access (registration happens at the front desk)
    - technician: no access
    """

    read_roles = {ROLE_ADMIN, ROLE_ATTENDANT}
    write_roles = {ROLE_ADMIN, ROLE_ATTENDANT}
