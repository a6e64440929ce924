"""
Session principal resolution.

A session record (the decoded session token) carries identity, email and
role only. Permissions are looked up from the catalog on every request,
so catalog changes apply to sessions that are already logged in.
"""

from typing import Any, FrozenSet, Mapping, Optional

from pydantic import BaseModel

from backend.app.core.permissions import permissions_for_role


class Principal(BaseModel):
    """Authenticated caller for one request. Never mutated."""
    identity: str
    display_email: str
    role: str
    permissions: FrozenSet[str] = frozenset()

    class Config:
        frozen = True

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


def resolve_principal(session_record: Optional[Mapping[str, Any]]) -> Optional[Principal]:
    """
    Build the principal for a session record.

    Args:
        session_record: Decoded session payload with ``sub`` (identity),
            ``email`` and ``role``; None when the caller has no session

    Returns:
        Principal, or None for anonymous callers
    """
    if not session_record:
        return None

    identity = session_record.get("sub")
    if not identity:
        return None

    role = session_record.get("role") or ""
    return Principal(
        identity=str(identity),
        display_email=session_record.get("email") or "",
        role=role,
        permissions=permissions_for_role(role),
    )
