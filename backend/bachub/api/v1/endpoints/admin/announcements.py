from fastapi import APIRouter, Depends, status
from typing import List

from bachub.core.exceptions import AnnouncementNotFoundError
from bachub.core.logging_config import logger
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import (
    AnnouncementCreate,
    AnnouncementCreateRequest,
    AnnouncementResponse,
    AnnouncementUpdate,
    MessageResponse,
)
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """All announcements, including inactive ones"""
    return await storage.get_announcements()


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement_data: AnnouncementCreateRequest,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    announcement = await storage.create_announcement(AnnouncementCreate(
        **announcement_data.model_dump(),
        created_by=current_admin.id,
    ))
    logger.log_admin_action("create", "announcement", announcement.id, admin_id=current_admin.id)
    return announcement


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: int,
    announcement_data: AnnouncementUpdate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    announcement = await storage.update_announcement(
        announcement_id, announcement_data.model_dump(exclude_unset=True, exclude_none=True)
    )
    if not announcement:
        raise AnnouncementNotFoundError(announcement_id)

    logger.log_admin_action("update", "announcement", announcement_id, admin_id=current_admin.id)
    return announcement


@router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    await storage.delete_announcement(announcement_id)
    logger.log_admin_action("delete", "announcement", announcement_id, admin_id=current_admin.id)
    return {"message": "Announcement deleted successfully"}
