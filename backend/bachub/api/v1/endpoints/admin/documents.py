"""
Admin document management endpoints.
"""
from fastapi import APIRouter, Depends, status

from bachub.core.exceptions import DocumentNotFoundError, ValidationError
from bachub.core.logging_config import logger
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import (
    DocumentCreate,
    DocumentCreateRequest,
    DocumentResponse,
    DocumentUpdate,
    MessageResponse,
)
from bachub.storage import Storage, get_storage

router = APIRouter()


async def _require_subject(storage: Storage, subject_id: int):
    if not await storage.get_subject(subject_id):
        raise ValidationError("Subject does not exist", field="subjectId")


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreateRequest,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Register document metadata, uploaded by the calling admin"""
    await _require_subject(storage, document_data.subject_id)

    document = await storage.create_document(DocumentCreate(
        **document_data.model_dump(),
        uploaded_by=current_admin.id,
    ))
    logger.log_admin_action("create", "document", document.id, admin_id=current_admin.id)
    return document


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    document_data: DocumentUpdate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    fields = document_data.model_dump(exclude_unset=True, exclude_none=True)
    if "subject_id" in fields:
        await _require_subject(storage, fields["subject_id"])

    document = await storage.update_document(document_id, fields)
    if not document:
        raise DocumentNotFoundError(document_id)

    logger.log_admin_action("update", "document", document_id, admin_id=current_admin.id)
    return document


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete document metadata. Ratings, comments and favorites are kept."""
    await storage.delete_document(document_id)
    logger.log_admin_action("delete", "document", document_id, admin_id=current_admin.id)
    return {"message": "Document deleted successfully"}
