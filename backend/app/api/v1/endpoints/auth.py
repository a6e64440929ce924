"""
Authentication API endpoints.

Provides login, logout, current-principal and user management endpoints.
User accounts are created by an administrator; there is no self sign-up.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference
from backend.app.models.user import User
from backend.app.models.resident import Resident
from backend.app.models.enums import AuditAction
from backend.app.schemas.auth import (
    UserRegister, UserLogin, UserUpdate, UserResponse,
    TokenResponse, CurrentUserResponse, MessageResponse,
)
from backend.app.core.security import get_password_hash, verify_password, burn_password_check
from backend.app.core.jwt import create_access_token
from backend.app.core.dependencies import get_session_record
from backend.app.core.exceptions import ConflictError, InvalidCredentialsError, ResourceNotFoundError
from backend.app.core.guards import require_authenticated, require_permission
from backend.app.core.logging_config import get_logger
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.core.token_revocation import revoke_session
from backend.app.services.audit_trail import audited, path_param

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger("auth")


async def _get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[str] = None) -> None:
    stmt = select(User.id).where(User.email == email)
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    result = await db.execute(stmt)
    if result.scalar_one_or_none():
        raise ConflictError("Email already registered", details={"email": email})


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with email and password and return a session token.

    The token carries the session record (identity, email, role) only;
    permissions are resolved from the role on every request.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    if not user:
        burn_password_check()
        logger.warning("Login failed for %s: unknown account", credentials.email)
        raise InvalidCredentialsError()

    if not verify_password(credentials.password, user.password_hash):
        logger.warning("Login failed for %s: wrong password", credentials.email)
        raise InvalidCredentialsError()

    access_token = create_access_token(data={
        "sub": user.id,
        "email": user.email,
        "role": user.role,
    })
    logger.info("Login succeeded for %s", user.email)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    principal: Principal = Depends(require_authenticated),
    session_record: Dict[str, Any] = Depends(get_session_record),
):
    """
    Revoke the presented session token.

    The token stays revoked until it would have expired anyway.
    """
    await revoke_session(session_record)
    logger.info("Logout for %s", principal.display_email)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    principal: Principal = Depends(require_authenticated),
):
    """
    Get the request principal with its resolved permission set.
    """
    return CurrentUserResponse(
        id=principal.identity,
        email=principal.display_email,
        role=principal.role,
        permissions=sorted(principal.permissions),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    principal: Principal = Depends(require_permission(Permission.USERS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a user account (administrators only).

    Raises:
        409: If the email is already registered
    """
    await _ensure_email_free(db, user_data.email)
    await ensure_reference(db, Resident, user_data.resident_id, "Resident")

    new_user = User(
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        role=user_data.role.value,
        resident_id=user_data.resident_id,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("User %s created by %s", new_user.email, principal.display_email)
    return UserResponse.model_validate(new_user)


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    principal: Principal = Depends(require_permission(Permission.USERS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List all user accounts."""
    result = await db.execute(select(User).order_by(User.email))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.put("/users/{user_id}", response_model=UserResponse)
@audited(AuditAction.UPDATE, "user", path_param("user_id"),
         lambda request, body: f"Updated user {body['email']}")
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    principal: Principal = Depends(require_permission(Permission.USERS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a user's email, password, role or resident link.

    The session token carries the role, so a role change applies from the
    user's next login.
    """
    user = await _get_user_or_404(db, user_id)
    changes = user_data.model_dump(exclude_unset=True)

    if "email" in changes and changes["email"] != user.email:
        await _ensure_email_free(db, changes["email"], exclude_id=user.id)
        user.email = changes["email"]
    if changes.get("password"):
        user.password_hash = get_password_hash(changes["password"])
    if changes.get("role") is not None:
        user.role = changes["role"].value
    if "resident_id" in changes:
        await ensure_reference(db, Resident, changes["resident_id"], "Resident")
        user.resident_id = changes["resident_id"]

    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "user", path_param("user_id"),
         lambda request, body: f"Deleted user {request.path_params['user_id']}")
async def delete_user(
    user_id: str,
    principal: Principal = Depends(require_permission(Permission.USERS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user account."""
    user = await _get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
