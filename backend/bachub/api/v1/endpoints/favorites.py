from fastapi import APIRouter, Depends
from typing import List

from bachub.models import User
from bachub.modules.auth.dependencies import get_current_user
from bachub.schemas import FavoriteWithDocument
from bachub.services import DocumentService
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[FavoriteWithDocument])
async def list_favorites(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    """The caller's favorites, each with its document"""
    return await DocumentService(storage).favorites_for(current_user.id)
