"""
Package Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from backend.app.models.enums import PackageStatus


class PackageCreate(BaseModel):
    """Schema for logging a delivery."""
    unit_id: str
    tracking_number: Optional[str] = Field(None, max_length=100)
    carrier: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    status: PackageStatus = PackageStatus.ARRIVED
    source: str = Field(default="manual", max_length=50)


class PackageUpdate(BaseModel):
    tracking_number: Optional[str] = Field(None, max_length=100)
    carrier: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    status: Optional[PackageStatus] = None
    picked_up_at: Optional[datetime] = Field(None, description="Defaults to now when marked picked up")

    @field_validator("status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class PackageResponse(BaseModel):
    id: str
    unit_id: str
    tracking_number: Optional[str]
    carrier: Optional[str]
    description: Optional[str]
    status: str
    source: str
    received_at: datetime
    picked_up_at: Optional[datetime]

    class Config:
        from_attributes = True
