from fastapi import APIRouter, Depends

from bachub.core.logging_config import logger
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import MessageResponse
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Moderate a comment"""
    await storage.delete_comment(comment_id)
    logger.log_admin_action("delete", "comment", comment_id, admin_id=current_admin.id)
    return {"message": "Comment deleted successfully"}
