"""
Audit recorder: append-only trail of resource mutations.

``append`` is fire-and-forget. The write runs as a detached task with its
own session; failures go to the log and never reach the caller, so an
unavailable audit table cannot fail the business operation it describes.
``write`` is the awaited form used underneath.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.logging_config import get_logger
from backend.app.core.principal import Principal
from backend.app.db.session import AsyncSessionLocal
from backend.app.models.audit_log import AuditLog
from backend.app.models.enums import AuditAction

logger = get_logger("audit")


@dataclass(frozen=True)
class AuditEntryDraft:
    """Audit entry before the recorder assigns ``id`` and ``occurred_at``."""
    actor_id: Optional[str]
    actor_email: Optional[str]
    actor_role: Optional[str]
    action: AuditAction
    resource_type: str
    resource_id: Optional[str]
    summary: str

    @classmethod
    def for_principal(
        cls,
        principal: Principal,
        action: AuditAction,
        resource_type: str,
        resource_id: Optional[str],
        summary: str,
    ) -> "AuditEntryDraft":
        """Snapshot the principal into a draft."""
        return cls(
            actor_id=principal.identity,
            actor_email=principal.display_email,
            actor_role=principal.role,
            action=AuditAction(action),
            resource_type=resource_type,
            resource_id=None if resource_id is None else str(resource_id),
            summary=summary,
        )


@dataclass(frozen=True)
class AuditFilter:
    """
    Query filter for the audit trail.

    ``resource_type`` and ``resource_id`` are exact matches; ``limit`` caps
    the result count (None means uncapped).
    """
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    limit: Optional[int] = None


class AuditRecorder:
    """
    Durable audit log with append and query operations.

    There is no update or delete: the trail is append-only.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory
        self._pending: Set[asyncio.Task] = set()

    def append(self, draft: AuditEntryDraft) -> None:
        """
        Schedule one audit write without waiting for it.

        Must be called from inside a running event loop (a request).
        """
        task = asyncio.get_running_loop().create_task(self._write_quietly(draft))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def write(self, draft: AuditEntryDraft) -> AuditLog:
        """
        Persist one audit entry and return it.

        Raises whatever the database raises.
        """
        entry = AuditLog(
            id=str(uuid.uuid4()),
            actor_id=draft.actor_id,
            actor_email=draft.actor_email,
            actor_role=draft.actor_role,
            action=draft.action.value,
            resource_type=draft.resource_type,
            resource_id=draft.resource_id,
            summary=draft.summary,
            occurred_at=datetime.now(timezone.utc),
        )
        async with self._session_factory() as session:
            session.add(entry)
            await session.commit()
        return entry

    async def _write_quietly(self, draft: AuditEntryDraft) -> None:
        try:
            await self.write(draft)
        except Exception:
            logger.exception(
                "AUDIT_WRITE_FAILURE action=%s resource=%s:%s actor=%s",
                draft.action.value, draft.resource_type, draft.resource_id, draft.actor_email,
            )

    async def query(self, audit_filter: AuditFilter) -> List[AuditLog]:
        """
        Retrieve audit entries, newest first.

        Args:
            audit_filter: Optional resource type / resource id match and limit

        Returns:
            List of AuditLog instances, most recent first
        """
        stmt = select(AuditLog).order_by(desc(AuditLog.occurred_at))

        if audit_filter.resource_type:
            stmt = stmt.where(AuditLog.resource_type == audit_filter.resource_type)

        if audit_filter.resource_id:
            stmt = stmt.where(AuditLog.resource_id == audit_filter.resource_id)

        if audit_filter.limit is not None:
            stmt = stmt.limit(audit_filter.limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @property
    def pending(self) -> int:
        """Number of audit writes still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight audit writes (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


audit_recorder = AuditRecorder(AsyncSessionLocal)


def get_audit_recorder() -> AuditRecorder:
    """FastAPI dependency for the process-wide audit recorder."""
    return audit_recorder
