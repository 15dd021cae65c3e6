from fastapi import APIRouter, Depends, status

from bachub.core.exceptions import DuplicateRecordError, SubjectNotFoundError
from bachub.core.logging_config import logger
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import MessageResponse, SubjectCreate, SubjectResponse, SubjectUpdate
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_data: SubjectCreate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    subject = await storage.create_subject(subject_data)
    logger.log_admin_action("create", "subject", subject.id, admin_id=current_admin.id)
    return subject


@router.put("/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    subject_id: int,
    subject_data: SubjectUpdate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    if subject_data.name:
        other = await storage.get_subject_by_name(subject_data.name)
        if other and other.id != subject_id:
            raise DuplicateRecordError("Subject already exists", field="name")

    subject = await storage.update_subject(
        subject_id, subject_data.model_dump(exclude_unset=True, exclude_none=True)
    )
    if not subject:
        raise SubjectNotFoundError(subject_id)

    logger.log_admin_action("update", "subject", subject_id, admin_id=current_admin.id)
    return subject


@router.delete("/{subject_id}", response_model=MessageResponse)
async def delete_subject(
    subject_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete a subject; its documents keep the dangling reference"""
    await storage.delete_subject(subject_id)
    logger.log_admin_action("delete", "subject", subject_id, admin_id=current_admin.id)
    return {"message": "Subject deleted successfully"}
