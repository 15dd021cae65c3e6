from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from bachub.schemas import SettingResponse
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[SettingResponse])
async def list_settings(
    keys: Optional[str] = Query(None, description="Comma-separated keys to return"),
    storage: Storage = Depends(get_storage)
):
    """Public site settings (footer, contact details, social links)"""
    wanted = [k.strip() for k in keys.split(",") if k.strip()] if keys else None
    return await storage.get_settings(wanted)
