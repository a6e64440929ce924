"""
Assessment database models.

An assessment is a one-time total split across units by ownership share;
each unit's portion is an AssessmentCharge.
"""

import uuid

from sqlalchemy import Column, String, Text, Date, DateTime, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import ChargeStatus


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    per_share_amount = Column(Numeric(12, 4), nullable=True)
    effective_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Assessment(id={self.id}, title='{self.title}', total={self.total_amount})>"


class AssessmentCharge(Base):
    """
    A unit's portion of an assessment. One per unit per assessment.
    """
    __tablename__ = "assessment_charges"
    __table_args__ = (
        UniqueConstraint("assessment_id", "unit_id", name="uq_assessment_charge_unit"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default=ChargeStatus.PENDING.value, nullable=False)
    paid_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AssessmentCharge(id={self.id}, assessment_id={self.assessment_id}, unit_id={self.unit_id}, amount={self.amount})>"
