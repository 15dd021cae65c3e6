"""
Public document endpoints: browsing, detail, download, comments, ratings
and favorites of a single document.
"""

from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional

from bachub.core.exceptions import DuplicateFavoriteError, FavoriteNotFoundError
from bachub.core.logging_config import get_logger
from bachub.models import Document, User
from bachub.modules.auth.dependencies import (
    get_current_user,
    get_optional_user,
    get_document_or_404,
)
from bachub.schemas import (
    CommentCreate,
    CommentCreateRequest,
    CommentWithUser,
    DocumentDetail,
    DocumentWithStats,
    DownloadInfo,
    DownloadResponse,
    FavoriteCreate,
    FavoriteResponse,
    MessageResponse,
    RatingCreate,
    RatingRequest,
    RatingResponse,
    RatingResult,
)
from bachub.services import DocumentService
from bachub.storage import Storage, get_storage

logger = get_logger("api.documents")

router = APIRouter()


@router.get("", response_model=List[DocumentWithStats])
async def list_documents(
    subject_id: Optional[int] = Query(None, alias="subjectId"),
    year: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    storage: Storage = Depends(get_storage)
):
    """
    List documents, newest first.

    Filters combine: ``subjectId`` and ``year`` match exactly, ``search``
    matches title or description case-insensitively.
    """
    return await DocumentService(storage).list_documents(
        subject_id=subject_id, year=year, search=search or None
    )


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(
    document: Document = Depends(get_document_or_404),
    current_user: Optional[User] = Depends(get_optional_user),
    storage: Storage = Depends(get_storage)
):
    return await DocumentService(storage).detail(document, current_user)


@router.get("/{document_id}/download", response_model=DownloadResponse)
async def download_document(
    document: Document = Depends(get_document_or_404),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    """Count a download. The file itself is served elsewhere."""
    await storage.increment_download_count(document.id)
    logger.info(
        f"Download of document {document.id} by user {current_user.id}",
        extra={"event_type": "download", "document_id": document.id}
    )
    return DownloadResponse(
        document=DownloadInfo(id=document.id, title=document.title, file_name=document.file_name)
    )


# ==================== Comments ====================

@router.get("/{document_id}/comments", response_model=List[CommentWithUser])
async def list_comments(document_id: int, storage: Storage = Depends(get_storage)):
    """Comments on a document, newest first, each with its author"""
    return await DocumentService(storage).comments_for(document_id)


@router.post("/{document_id}/comments", response_model=CommentWithUser, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreateRequest,
    document: Document = Depends(get_document_or_404),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    comment = await storage.create_comment(CommentCreate(
        document_id=document.id,
        user_id=current_user.id,
        content=comment_data.content,
        is_admin_response=current_user.is_admin,
        parent_id=comment_data.parent_id,
    ))
    return await DocumentService(storage).comment_with_user(comment)


# ==================== Ratings ====================

@router.post("/{document_id}/ratings", response_model=RatingResult, status_code=status.HTTP_201_CREATED)
async def rate_document(
    rating_data: RatingRequest,
    document: Document = Depends(get_document_or_404),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    """Set the caller's rating; a second rating replaces the first"""
    rating = await storage.create_rating(RatingCreate(
        document_id=document.id,
        user_id=current_user.id,
        rating=rating_data.rating,
    ))
    return RatingResult(
        rating=RatingResponse.model_validate(rating),
        average_rating=await storage.get_average_rating(document.id),
        rating_count=await storage.count_ratings(document.id),
    )


# ==================== Favorites ====================

@router.post("/{document_id}/favorites", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    document: Document = Depends(get_document_or_404),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    if await storage.get_favorite_by_user_and_document(current_user.id, document.id):
        raise DuplicateFavoriteError(current_user.id, document.id)

    return await storage.create_favorite(FavoriteCreate(
        document_id=document.id,
        user_id=current_user.id,
    ))


@router.delete("/{document_id}/favorites", response_model=MessageResponse)
async def remove_favorite(
    document_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage)
):
    favorite = await storage.get_favorite_by_user_and_document(current_user.id, document_id)
    if not favorite:
        raise FavoriteNotFoundError(document_id)

    await storage.delete_favorite(favorite.id)
    return {"message": "Favorite removed successfully"}
