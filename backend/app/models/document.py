"""
Document database model.

Metadata only; file bytes live in external storage.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from backend.app.db.session import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    category = Column(String(50), nullable=False, default="general", index=True)
    description = Column(Text, nullable=True)
    file_url = Column(String(500), nullable=True)
    uploaded_by = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Document(id={self.id}, title='{self.title}', category='{self.category}')>"
