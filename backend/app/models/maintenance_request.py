"""
Maintenance request database model.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import MaintenanceStatus, MaintenancePriority


class MaintenanceRequest(Base):
    """
    Repair request submitted by a resident and worked by building staff.

    Residents submit (``maintenance:write``); only staff move status or
    assign (``maintenance:manage``).
    """
    __tablename__ = "maintenance_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
    submitted_by = Column(String(36), ForeignKey("residents.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    priority = Column(String(20), default=MaintenancePriority.NORMAL.value, nullable=False)
    status = Column(String(20), default=MaintenanceStatus.OPEN.value, nullable=False, index=True)
    assigned_to = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<MaintenanceRequest(id={self.id}, title='{self.title}', status='{self.status}')>"
