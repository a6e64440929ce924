"""
Maintenance charge database model.

One recurring monthly obligation per unit and billing period.
"""

import uuid

from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import ChargeStatus


class MaintenanceCharge(Base):
    """
    Maintenance charge model.

    ``amount`` is copied from the unit's rate when the charge is generated;
    later rate changes leave existing charges alone.
    A unit holds at most one charge per period.
    """
    __tablename__ = "maintenance_charges"
    __table_args__ = (
        UniqueConstraint("unit_id", "period_year", "period_month", name="uq_maintenance_charge_unit_period"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)

    period_month = Column(Integer, nullable=False)
    period_year = Column(Integer, nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default=ChargeStatus.PENDING.value, nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<MaintenanceCharge(id={self.id}, unit_id={self.unit_id}, period={self.period_month}/{self.period_year}, amount={self.amount})>"
