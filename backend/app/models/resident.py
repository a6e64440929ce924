"""
Resident database model.
"""

import uuid

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import ResidentRole


class Resident(Base):
    """
    Person living in (or holding shares of) a unit.
    """
    __tablename__ = "residents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="CASCADE"), nullable=True, index=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    role = Column(String(20), default=ResidentRole.SHAREHOLDER.value, nullable=False, index=True)
    is_primary = Column(Boolean, default=False, nullable=False)
    shares_held = Column(Integer, nullable=True)

    move_in_date = Column(Date, nullable=True)
    move_out_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Resident(id={self.id}, name='{self.full_name}', unit_id={self.unit_id})>"
