"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication and user
management endpoints.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import List, Optional
from backend.app.models.enums import UserRole


class UserRegister(BaseModel):
    """
    Schema for account creation.

    Used by POST /auth/register (admin only). Default role is RESIDENT.
    """
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    role: UserRole = Field(default=UserRole.RESIDENT, description="User role (defaults to RESIDENT)")
    resident_id: Optional[str] = Field(default=None, description="Linked resident record")


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class UserUpdate(BaseModel):
    """Schema for updating a user. Omitted fields are left unchanged."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    resident_id: Optional[str] = None

    @field_validator("email", "password", "role")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class UserResponse(BaseModel):
    """
    Safe user representation (never includes the password hash).
    """
    id: str
    email: str
    role: str
    resident_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """
    Schema for session token response.

    Returned by a successful login.
    """
    access_token: str = Field(..., description="Session token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserResponse


class CurrentUserResponse(BaseModel):
    """
    Schema for GET /auth/me: the request principal with its resolved
    permission set.
    """
    id: str
    email: str
    role: str
    permissions: List[str]


class MessageResponse(BaseModel):
    message: str
