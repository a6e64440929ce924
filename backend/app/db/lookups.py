"""
Primary-key lookups shared by the API endpoints.
"""

from typing import Any, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.exceptions import ResourceNotFoundError


async def get_or_404(db: AsyncSession, model: Type[Any], identifier: str, label: str) -> Any:
    """Load ``model`` by primary key or raise ResourceNotFoundError naming ``label``."""
    instance = await db.get(model, identifier)
    if not instance:
        raise ResourceNotFoundError(label, identifier)
    return instance


async def ensure_reference(db: AsyncSession, model: Type[Any], identifier: Optional[str], label: str) -> None:
    """
    Check that an optional foreign key points at an existing row.

    ``None`` means "no reference" and always passes. A dangling id raises
    ResourceNotFoundError before the insert can fail on the constraint.
    """
    if identifier is None:
        return
    await get_or_404(db, model, identifier, label)
