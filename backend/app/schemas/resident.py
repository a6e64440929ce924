"""
Resident Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Optional
from backend.app.models.enums import ResidentRole


class ResidentCreate(BaseModel):
    """Schema for adding a resident to a unit."""
    unit_id: Optional[str] = None
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    role: ResidentRole = ResidentRole.SHAREHOLDER
    is_primary: bool = False
    shares_held: Optional[int] = Field(None, ge=0)
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None


class ResidentUpdate(BaseModel):
    unit_id: Optional[str] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[ResidentRole] = None
    is_primary: Optional[bool] = None
    shares_held: Optional[int] = Field(None, ge=0)
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None

    @field_validator("first_name", "last_name", "role", "is_primary")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ResidentResponse(BaseModel):
    id: str
    unit_id: Optional[str]
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    role: str
    is_primary: bool
    shares_held: Optional[int]
    move_in_date: Optional[date]
    move_out_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
