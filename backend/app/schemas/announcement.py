"""
Announcement Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    category: str = Field(default="general", max_length=50)
    posted_by: Optional[str] = Field(None, description="Resident record of the author")
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    body: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, max_length=50)
    expires_at: Optional[datetime] = None

    @field_validator("title", "body", "category")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class AnnouncementResponse(BaseModel):
    id: str
    title: str
    body: str
    category: str
    posted_by: Optional[str]
    posted_at: datetime
    expires_at: Optional[datetime]

    class Config:
        from_attributes = True
