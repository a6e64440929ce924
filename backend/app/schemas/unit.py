"""
Unit Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from backend.app.models.enums import UnitStatus


class UnitCreate(BaseModel):
    """Schema for creating a unit."""
    building_id: Optional[str] = None
    unit_number: str = Field(..., min_length=1, max_length=20)
    floor: Optional[int] = None
    rooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    shares: int = Field(default=0, ge=0, description="Ownership shares; drives assessments")
    monthly_maintenance: Optional[float] = Field(None, ge=0, description="Recurring monthly rate")
    status: UnitStatus = UnitStatus.OCCUPIED


class UnitUpdate(BaseModel):
    """Schema for updating a unit. Omitted fields are left unchanged."""
    building_id: Optional[str] = None
    unit_number: Optional[str] = Field(None, min_length=1, max_length=20)
    floor: Optional[int] = None
    rooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    shares: Optional[int] = Field(None, ge=0)
    monthly_maintenance: Optional[float] = Field(None, ge=0)
    status: Optional[UnitStatus] = None

    @field_validator("unit_number", "shares", "status")
    @classmethod
    def reject_null(cls, value):
        # Columns are NOT NULL; omit the field to leave it unchanged
        if value is None:
            raise ValueError("may not be null")
        return value


class UnitResponse(BaseModel):
    id: str
    building_id: Optional[str]
    unit_number: str
    floor: Optional[int]
    rooms: Optional[float]
    square_feet: Optional[int]
    shares: int
    monthly_maintenance: Optional[float]
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
