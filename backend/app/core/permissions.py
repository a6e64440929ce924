"""
Permission catalog and role -> permission mapping.

Permissions are ``<resource-domain>:<action>`` strings. ``manage`` only
exists where submitting and administering must be told apart
(maintenance requests). The mapping is built once at import and exposed
read-only; adding a role means adding an entry here.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping


class Permission:
    """Permission string constants."""
    BUILDING_READ = "building:read"
    BUILDING_WRITE = "building:write"

    UNITS_READ = "units:read"
    UNITS_WRITE = "units:write"

    RESIDENTS_READ = "residents:read"
    RESIDENTS_WRITE = "residents:write"

    BOARD_READ = "board:read"
    BOARD_WRITE = "board:write"

    ANNOUNCEMENTS_READ = "announcements:read"
    ANNOUNCEMENTS_WRITE = "announcements:write"

    DOCUMENTS_READ = "documents:read"
    DOCUMENTS_WRITE = "documents:write"

    MAINTENANCE_READ = "maintenance:read"
    MAINTENANCE_WRITE = "maintenance:write"    # submit a request
    MAINTENANCE_MANAGE = "maintenance:manage"  # update status, assign

    FINANCES_READ = "finances:read"
    FINANCES_WRITE = "finances:write"

    STAFF_READ = "staff:read"
    STAFF_WRITE = "staff:write"

    VENDORS_READ = "vendors:read"
    VENDORS_WRITE = "vendors:write"

    APPLICATIONS_READ = "applications:read"
    APPLICATIONS_WRITE = "applications:write"

    WAITLISTS_READ = "waitlists:read"
    WAITLISTS_WRITE = "waitlists:write"

    COMPLIANCE_READ = "compliance:read"
    COMPLIANCE_WRITE = "compliance:write"

    PACKAGES_READ = "packages:read"
    PACKAGES_WRITE = "packages:write"

    PROVIDERS_READ = "providers:read"
    PROVIDERS_WRITE = "providers:write"

    USERS_READ = "users:read"
    USERS_WRITE = "users:write"


ALL_PERMISSIONS: FrozenSet[str] = frozenset(
    value for name, value in vars(Permission).items() if name.isupper()
)


def _build_role_permissions() -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({

        # =====================================================
        # ADMIN - managing agent / board, every permission
        # =====================================================
        "admin": ALL_PERMISSIONS,

        # =====================================================
        # RESIDENT - read the building, submit maintenance,
        # log packages and join waitlists
        # =====================================================
        "resident": frozenset({
            Permission.BUILDING_READ,
            Permission.UNITS_READ,
            Permission.RESIDENTS_READ,
            Permission.BOARD_READ,
            Permission.ANNOUNCEMENTS_READ,
            Permission.DOCUMENTS_READ,
            Permission.MAINTENANCE_READ,
            Permission.MAINTENANCE_WRITE,
            Permission.COMPLIANCE_READ,
            Permission.PACKAGES_READ,
            Permission.PACKAGES_WRITE,
            Permission.WAITLISTS_READ,
            Permission.WAITLISTS_WRITE,
        }),
    })


ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = _build_role_permissions()


def permissions_for_role(role: str) -> FrozenSet[str]:
    """
    Resolve the permission set of a role.

    Unknown roles resolve to an empty set rather than an error, so a role
    the catalog does not know yet is denied everything.
    """
    return ROLE_PERMISSIONS.get(role, frozenset())
