"""
Admin dashboard statistics endpoint.
"""
from fastapi import APIRouter, Depends

from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import AdminStats
from bachub.services import DocumentService
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Totals plus the five newest and five most downloaded documents"""
    return await DocumentService(storage).admin_stats()
