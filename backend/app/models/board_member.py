"""
Board member database model.
"""

import uuid

from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import BoardRole


class BoardMember(Base):
    """A resident's seat on the co-op board for one term."""
    __tablename__ = "board_members"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    resident_id = Column(String(36), ForeignKey("residents.id", ondelete="CASCADE"), nullable=False, index=True)

    role = Column(String(20), default=BoardRole.MEMBER.value, nullable=False)
    term_start = Column(Date, nullable=True)
    term_end = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<BoardMember(id={self.id}, resident_id={self.resident_id}, role='{self.role}')>"
