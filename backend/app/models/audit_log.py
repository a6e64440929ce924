"""
Audit Log Database Model.

Append-only record of resource mutations: who changed what, and when.
"""

from sqlalchemy import Column, String, DateTime
from backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log entry.

    The actor columns are a snapshot of the principal at the time of the
    action, not a reference: the user may later change role or be deleted.
    ``id`` and ``occurred_at`` are assigned by the recorder at write time.
    Rows are never updated or deleted.
    """
    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True)

    # Who performed the action
    actor_id = Column(String(36), nullable=True, index=True)
    actor_email = Column(String(255), nullable=True)
    actor_role = Column(String(50), nullable=True)

    # What was done to which resource
    action = Column(String(20), nullable=False, index=True)
    resource_type = Column(String(50), nullable=False, index=True)
    resource_id = Column(String(36), nullable=True, index=True)  # None for batch operations
    summary = Column(String(500), nullable=False)

    occurred_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', resource={self.resource_type}:{self.resource_id}, actor={self.actor_email})>"
