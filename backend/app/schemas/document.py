"""
Document Pydantic schemas (metadata only).
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(default="general", max_length=50)
    description: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=500)


class DocumentResponse(BaseModel):
    id: str
    title: str
    category: str
    description: Optional[str]
    file_url: Optional[str]
    uploaded_by: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
