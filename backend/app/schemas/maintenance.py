"""
Maintenance request Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import MaintenancePriority, MaintenanceStatus


class MaintenanceRequestCreate(BaseModel):
    """Schema for submitting a maintenance request."""
    unit_id: Optional[str] = None
    submitted_by: Optional[str] = Field(None, description="Resident submitting the request")
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: MaintenancePriority = MaintenancePriority.NORMAL


class MaintenanceRequestUpdate(BaseModel):
    """Schema for staff updates: status, priority and assignment."""
    status: Optional[MaintenanceStatus] = None
    priority: Optional[MaintenancePriority] = None
    assigned_to: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=50)


class MaintenanceRequestResponse(BaseModel):
    id: str
    unit_id: Optional[str]
    submitted_by: Optional[str]
    title: str
    description: Optional[str]
    category: Optional[str]
    priority: str
    status: str
    assigned_to: Optional[str]
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True
