"""
Enumerations for the building management system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    Roles known to the permission catalog.

    The users table stores the role as a plain string, so a role added to
    the catalog later needs no schema change.

    Roles:
        ADMIN: Managing agent / board, full access
        RESIDENT: Shareholder or tenant with read access (default role)
    """
    ADMIN = "admin"
    RESIDENT = "resident"


class AuditAction(str, enum.Enum):
    """Closed set of audited actions."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class UnitStatus(str, enum.Enum):
    OCCUPIED = "occupied"
    VACANT = "vacant"
    SPONSOR = "sponsor"  # Rate-exempt sponsor-held unit


class ResidentRole(str, enum.Enum):
    SHAREHOLDER = "shareholder"
    TENANT = "tenant"
    OCCUPANT = "occupant"


class MaintenanceStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class MaintenancePriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    URGENT = "urgent"


class ChargeStatus(str, enum.Enum):
    """Status of a maintenance or assessment charge."""
    PENDING = "pending"
    PAID = "paid"


class BoardRole(str, enum.Enum):
    """Board offices, listed in order of precedence."""
    PRESIDENT = "president"
    VICE_PRESIDENT = "vice_president"
    TREASURER = "treasurer"
    SECRETARY = "secretary"
    MEMBER = "member"


class PackageStatus(str, enum.Enum):
    ARRIVED = "arrived"
    NOTIFIED = "notified"
    PICKED_UP = "picked_up"
