"""
Announcement database model.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base


class Announcement(Base):
    """
    Notice posted to all residents.

    ``posted_by`` points at the resident record of the author, if any.
    """
    __tablename__ = "announcements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, default="general", index=True)
    posted_by = Column(String(36), ForeignKey("residents.id", ondelete="SET NULL"), nullable=True)

    posted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Announcement(id={self.id}, title='{self.title}')>"
