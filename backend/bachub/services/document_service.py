"""
Document Service - composes the enriched views the API returns

Handles:
- Subject name/color, rating and comment totals on documents
- Caller-specific favorite/rating flags on the detail view
- Author profiles on comments, documents on favorites
- Admin dashboard totals
"""

from typing import List, Optional

from bachub.core.logging_config import get_logger
from bachub.models import Comment, Document, Favorite, Subject, User
from bachub.schemas import (
    AdminStats,
    CommentWithUser,
    DocumentDetail,
    DocumentResponse,
    DocumentWithStats,
    DocumentWithSubject,
    FavoriteResponse,
    FavoriteWithDocument,
    UserPublic,
)
from bachub.storage import Storage

logger = get_logger("services.documents")

UNKNOWN_SUBJECT = "Unknown"
UNKNOWN_SUBJECT_COLOR = "gray"

DASHBOARD_LIST_SIZE = 5


class DocumentService:
    """Builds response objects from storage records"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _subject_of(self, document: Document, cache: Optional[dict] = None) -> Optional[Subject]:
        if cache is not None:
            if document.subject_id not in cache:
                cache[document.subject_id] = await self.storage.get_subject(document.subject_id)
            return cache[document.subject_id]
        return await self.storage.get_subject(document.subject_id)

    async def with_subject(self, document: Document, cache: Optional[dict] = None) -> DocumentWithSubject:
        subject = await self._subject_of(document, cache)
        return DocumentWithSubject(
            **DocumentResponse.model_validate(document).model_dump(),
            subject=subject.name if subject else UNKNOWN_SUBJECT,
            subject_color=subject.color if subject else UNKNOWN_SUBJECT_COLOR,
        )

    async def with_stats(self, document: Document, cache: Optional[dict] = None) -> DocumentWithStats:
        base = await self.with_subject(document, cache)
        return DocumentWithStats(
            **base.model_dump(),
            average_rating=await self.storage.get_average_rating(document.id),
            rating_count=await self.storage.count_ratings(document.id),
            comment_count=await self.storage.count_comments(document.id),
        )

    async def list_documents(
        self,
        subject_id: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[DocumentWithStats]:
        documents = await self.storage.get_documents(subject_id=subject_id, year=year, search=search)
        subjects: dict = {}
        return [await self.with_stats(d, subjects) for d in documents]

    async def detail(self, document: Document, user: Optional[User] = None) -> DocumentDetail:
        """Document with totals, plus the caller's favorite flag and rating when signed in"""
        stats = await self.with_stats(document)

        is_favorite = False
        user_rating = 0
        if user is not None:
            favorite = await self.storage.get_favorite_by_user_and_document(user.id, document.id)
            is_favorite = favorite is not None
            rating = await self.storage.get_user_document_rating(user.id, document.id)
            user_rating = rating.rating if rating else 0

        return DocumentDetail(**stats.model_dump(), is_favorite=is_favorite, user_rating=user_rating)

    async def comment_with_user(self, comment: Comment) -> CommentWithUser:
        author = await self.storage.get_user(comment.user_id)
        return CommentWithUser.model_validate(comment).model_copy(
            update={"user": UserPublic.model_validate(author) if author else None}
        )

    async def comments_for(self, document_id: int) -> List[CommentWithUser]:
        comments = await self.storage.get_comments_by_document(document_id)
        return [await self.comment_with_user(c) for c in comments]

    async def favorites_for(self, user_id: int) -> List[FavoriteWithDocument]:
        favorites = await self.storage.get_favorites_by_user(user_id)
        subjects: dict = {}
        result = []
        for favorite in favorites:
            result.append(await self._favorite_with_document(favorite, subjects))
        return result

    async def _favorite_with_document(self, favorite: Favorite, cache: dict) -> FavoriteWithDocument:
        document = await self.storage.get_document(favorite.document_id)
        return FavoriteWithDocument(
            **FavoriteResponse.model_validate(favorite).model_dump(),
            document=await self.with_subject(document, cache) if document else None,
        )

    async def admin_stats(self) -> AdminStats:
        documents = await self.storage.get_documents()
        subjects: dict = {}

        recent = documents[:DASHBOARD_LIST_SIZE]
        popular = sorted(documents, key=lambda d: d.downloads, reverse=True)[:DASHBOARD_LIST_SIZE]

        stats = AdminStats(
            total_users=await self.storage.count_users(),
            total_documents=await self.storage.count_documents(),
            total_downloads=await self.storage.total_downloads(),
            total_comments=await self.storage.count_comments(),
            total_ratings=await self.storage.count_ratings(),
            recent_documents=[await self.with_subject(d, subjects) for d in recent],
            popular_documents=[await self.with_subject(d, subjects) for d in popular],
        )
        logger.debug(
            "Computed admin stats",
            extra={"total_documents": stats.total_documents, "total_downloads": stats.total_downloads},
        )
        return stats
