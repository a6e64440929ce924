"""
Unit tests for the permission catalog and session principal resolution.
"""

import pytest
from pydantic import ValidationError

from backend.app.core.permissions import (
    ALL_PERMISSIONS, ROLE_PERMISSIONS, Permission, permissions_for_role
)
from backend.app.core.principal import Principal, resolve_principal


def test_permissions_are_domain_action_strings():
    for permission in ALL_PERMISSIONS:
        domain, _, action = permission.partition(":")
        assert domain and action in {"read", "write", "manage"}


def test_admin_holds_every_permission():
    assert ROLE_PERMISSIONS["admin"] == ALL_PERMISSIONS


def test_resident_permissions():
    resident = ROLE_PERMISSIONS["resident"]
    assert Permission.MAINTENANCE_WRITE in resident
    assert Permission.PACKAGES_WRITE in resident
    assert Permission.WAITLISTS_WRITE in resident
    assert Permission.BOARD_READ in resident
    assert Permission.BOARD_WRITE not in resident
    assert Permission.ANNOUNCEMENTS_WRITE not in resident
    assert Permission.RESIDENTS_READ in resident
    assert Permission.RESIDENTS_WRITE not in resident
    assert Permission.MAINTENANCE_MANAGE not in resident
    assert Permission.FINANCES_READ not in resident
    assert Permission.USERS_READ not in resident


def test_catalog_domains():
    domains = {permission.partition(":")[0] for permission in ALL_PERMISSIONS}
    assert domains == {
        "building", "units", "residents", "board", "announcements", "documents",
        "maintenance", "finances", "staff", "vendors", "applications", "waitlists",
        "compliance", "packages", "providers", "users",
    }


def test_role_mapping_is_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS["janitor"] = frozenset({Permission.UNITS_READ})


@pytest.mark.parametrize("role", sorted(ROLE_PERMISSIONS))
def test_every_catalog_role_resolves_to_its_mapped_set(role):
    principal = resolve_principal({"sub": "u-1", "email": "a@b.test", "role": role})
    assert principal is not None
    assert principal.permissions == ROLE_PERMISSIONS[role]


@pytest.mark.parametrize("role", ["superuser", "", None, "ADMIN"])
def test_unknown_role_resolves_to_empty_permissions(role):
    principal = resolve_principal({"sub": "u-1", "email": "a@b.test", "role": role})
    assert principal is not None
    assert principal.permissions == frozenset()
    assert permissions_for_role(role or "") == frozenset()


@pytest.mark.parametrize("record", [None, {}, {"email": "a@b.test", "role": "admin"}])
def test_missing_session_resolves_to_anonymous(record):
    assert resolve_principal(record) is None


def test_principal_carries_session_identity():
    principal = resolve_principal({"sub": "u-42", "email": "board@parkview-towers.com", "role": "admin"})
    assert principal.identity == "u-42"
    assert principal.display_email == "board@parkview-towers.com"
    assert principal.role == "admin"


def test_principal_is_frozen():
    principal = resolve_principal({"sub": "u-1", "email": "a@b.test", "role": "resident"})
    with pytest.raises(ValidationError):
        principal.role = "admin"


def test_has_permission():
    principal = Principal(identity="u-1", display_email="a@b.test", role="resident",
                          permissions=frozenset({Permission.UNITS_READ}))
    assert principal.has_permission(Permission.UNITS_READ)
    assert not principal.has_permission(Permission.UNITS_WRITE)
