"""
Authorization gate.

Two checks, usable directly or as route dependencies:

- ``ensure_authenticated`` rejects anonymous callers (AUTH_REQUIRED)
- ``ensure_permission`` additionally rejects callers whose resolved
  permission set lacks the required permission (FORBIDDEN)

Both run before the handler body, so an unauthorized caller never reaches
a write. Neither logs nor touches state.
"""

from typing import Optional
from fastapi import Depends
from backend.app.core.dependencies import get_principal
from backend.app.core.exceptions import AuthenticationRequiredError, PermissionDeniedError
from backend.app.core.principal import Principal


def ensure_authenticated(principal: Optional[Principal]) -> Principal:
    """
    Pass an authenticated principal through unchanged.

    Raises:
        AuthenticationRequiredError if principal is None
    """
    if principal is None:
        raise AuthenticationRequiredError()
    return principal


def ensure_permission(permission: str, principal: Optional[Principal]) -> Principal:
    """
    Pass a principal holding ``permission`` through unchanged.

    Raises:
        AuthenticationRequiredError if principal is None
        PermissionDeniedError naming the permission if it is missing
    """
    principal = ensure_authenticated(principal)
    if not principal.has_permission(permission):
        raise PermissionDeniedError(permission)
    return principal


async def require_authenticated(
    principal: Optional[Principal] = Depends(get_principal),
) -> Principal:
    """
    Dependency for routes open to any logged-in user.

    Usage:
        @router.get("/auth/me")
        async def me(principal: Principal = Depends(require_authenticated)):
            ...
    """
    return ensure_authenticated(principal)


def require_permission(permission: str):
    """
    Dependency factory for permission-based access control.

    Usage:
        @router.post("/residents")
        async def create_resident(
            principal: Principal = Depends(require_permission(Permission.RESIDENTS_WRITE)),
        ):
            ...

    Args:
        permission: Catalog permission string the route requires

    Returns:
        FastAPI dependency returning the principal
    """
    async def permission_checker(
        principal: Optional[Principal] = Depends(get_principal),
    ) -> Principal:
        return ensure_permission(permission, principal)

    return permission_checker
