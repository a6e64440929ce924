"""
Board member Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional
from backend.app.models.enums import BoardRole


class BoardMemberCreate(BaseModel):
    resident_id: str
    role: BoardRole = BoardRole.MEMBER
    term_start: Optional[date] = None
    term_end: Optional[date] = None
    is_active: bool = True


class BoardMemberUpdate(BaseModel):
    """Seat changes; the seat stays with the same resident."""
    role: Optional[BoardRole] = None
    term_start: Optional[date] = None
    term_end: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator("role", "is_active")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class BoardMemberResponse(BaseModel):
    id: str
    resident_id: str
    role: str
    term_start: Optional[date]
    term_end: Optional[date]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
