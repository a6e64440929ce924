"""
Session dependencies for FastAPI.

Turns the bearer session token into a Principal. Missing, invalid,
expired or revoked tokens all resolve to an anonymous caller (None); the
guards decide whether anonymous is acceptable.
"""

from typing import Any, Dict, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backend.app.core.jwt import decode_access_token
from backend.app.core.principal import Principal, resolve_principal
from backend.app.core.token_revocation import is_session_revoked

# HTTP Bearer security scheme; absence of a token is not an error here
security = HTTPBearer(auto_error=False)


async def get_session_record(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Dict[str, Any]]:
    """
    Decode the session record carried by the request.

    Returns:
        Decoded token payload, or None for anonymous callers
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None

    if await is_session_revoked(payload):
        return None

    return payload


async def get_principal(
    session_record: Optional[Dict[str, Any]] = Depends(get_session_record),
) -> Optional[Principal]:
    """Resolve the request principal; re-run on every request."""
    return resolve_principal(session_record)
