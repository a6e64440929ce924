"""
Audit trail Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AuditEntryResponse(BaseModel):
    """One audit entry as returned by the audit routes."""
    id: str
    actor_id: Optional[str]
    actor_email: Optional[str]
    actor_role: Optional[str]
    action: str
    resource_type: str
    resource_id: Optional[str]
    summary: str
    occurred_at: datetime

    class Config:
        from_attributes = True
