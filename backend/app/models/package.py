"""
Package database model.

Deliveries logged at the front desk, tracked until picked up.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import PackageStatus


class Package(Base):
    __tablename__ = "packages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)

    tracking_number = Column(String(100), nullable=True)
    carrier = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)

    status = Column(String(20), default=PackageStatus.ARRIVED.value, nullable=False, index=True)
    source = Column(String(50), default="manual", nullable=False)  # manual or a delivery provider

    received_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    picked_up_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Package(id={self.id}, unit_id={self.unit_id}, status='{self.status}')>"
