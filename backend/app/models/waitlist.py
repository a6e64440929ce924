"""
Waitlist database model.
"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base


class WaitlistEntry(Base):
    """
    A resident's place on one waitlist (storage, bike room, parking...).

    ``position`` orders entries within a ``type``; new entries go to the end.
    """
    __tablename__ = "waitlists"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(String(50), nullable=False, index=True)
    resident_id = Column(String(36), ForeignKey("residents.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    fulfilled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<WaitlistEntry(id={self.id}, type='{self.type}', position={self.position})>"
