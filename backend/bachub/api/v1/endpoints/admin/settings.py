"""
Admin site settings endpoints.
"""
from fastapi import APIRouter, Depends
from typing import List

from bachub.core.logging_config import logger
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import MessageResponse, SettingResponse, SettingUpsert
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[SettingResponse])
async def list_settings(
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    return await storage.get_settings()


@router.post("", response_model=SettingResponse)
async def upsert_setting(
    setting_data: SettingUpsert,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Create or overwrite the setting stored under ``key``"""
    setting = await storage.update_setting_by_key(setting_data.key, setting_data.value)
    logger.log_admin_action("upsert", "setting", setting.key, admin_id=current_admin.id)
    return setting


@router.delete("/{setting_id}", response_model=MessageResponse)
async def delete_setting(
    setting_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    await storage.delete_setting(setting_id)
    logger.log_admin_action("delete", "setting", setting_id, admin_id=current_admin.id)
    return {"message": "Setting deleted successfully"}
