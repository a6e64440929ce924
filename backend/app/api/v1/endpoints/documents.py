"""
Document API Endpoints.

Document metadata only; file storage lives outside this service.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.models.document import Document
from backend.app.models.enums import AuditAction
from backend.app.schemas.document import DocumentCreate, DocumentResponse
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    category: Optional[str] = Query(None),
    principal: Principal = Depends(require_permission(Permission.DOCUMENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    query = select(Document).order_by(Document.created_at.desc())
    if category:
        query = query.where(Document.category == category)

    result = await db.execute(query)
    return [DocumentResponse.model_validate(d) for d in result.scalars().all()]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    principal: Principal = Depends(require_permission(Permission.DOCUMENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    document = await db.get(Document, document_id)
    if not document:
        raise ResourceNotFoundError("Document", document_id)
    return DocumentResponse.model_validate(document)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "document", body_field("id"),
         lambda request, body: f"Uploaded document {body['title']}")
async def create_document(
    document_data: DocumentCreate,
    principal: Principal = Depends(require_permission(Permission.DOCUMENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Record a document's metadata; the uploader is the request principal."""
    document = Document(**document_data.model_dump(), uploaded_by=principal.identity)

    db.add(document)
    await db.commit()
    await db.refresh(document)

    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "document", path_param("document_id"),
         lambda request, body: f"Deleted document {request.path_params['document_id']}")
async def delete_document(
    document_id: str,
    principal: Principal = Depends(require_permission(Permission.DOCUMENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    document = await db.get(Document, document_id)
    if not document:
        raise ResourceNotFoundError("Document", document_id)

    await db.delete(document)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
