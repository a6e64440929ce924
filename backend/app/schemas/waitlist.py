"""
Waitlist Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class WaitlistEntryCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50, description="Which waitlist, e.g. storage or parking")
    resident_id: str
    position: Optional[int] = Field(None, ge=1, description="Defaults to the end of the list")


class WaitlistEntryUpdate(BaseModel):
    position: Optional[int] = Field(None, ge=1)
    fulfilled_at: Optional[datetime] = None

    @field_validator("position")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class WaitlistEntryResponse(BaseModel):
    id: str
    type: str
    resident_id: str
    position: int
    fulfilled_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True
