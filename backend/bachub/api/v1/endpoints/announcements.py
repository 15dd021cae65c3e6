from fastapi import APIRouter, Depends, Query
from typing import List

from bachub.schemas import AnnouncementResponse
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    active_only: bool = Query(False, alias="activeOnly"),
    storage: Storage = Depends(get_storage)
):
    """Announcements, newest first"""
    return await storage.get_announcements(active_only=active_only)
