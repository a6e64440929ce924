"""
Unit database model.

A unit carries the two inputs of charge generation: its monthly
maintenance rate and its ownership shares.
"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import UnitStatus


class Unit(Base):
    """
    Apartment unit.

    ``monthly_maintenance`` is nullable: rate-exempt units are skipped by
    recurring charge generation. ``shares`` drives assessment distribution.
    """
    __tablename__ = "units"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    building_id = Column(String(36), nullable=True, index=True)

    unit_number = Column(String(20), nullable=False)
    floor = Column(Integer, nullable=True)
    rooms = Column(Numeric(4, 1), nullable=True)
    square_feet = Column(Integer, nullable=True)

    # Financials
    shares = Column(Integer, nullable=False, default=0)
    monthly_maintenance = Column(Numeric(10, 2), nullable=True)

    status = Column(String(20), default=UnitStatus.OCCUPIED.value, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Unit(id={self.id}, unit_number='{self.unit_number}', shares={self.shares})>"
