"""
Storage interface
=================

Every persistence operation the API needs, implemented by ``MemoryStorage``
(in-process dicts) and ``DatabaseStorage`` (async SQLAlchemy).

Conventions shared by both implementations:

- ``get_*`` returns the record or ``None``; lookups never raise for a
  missing id.
- ``create_*`` takes a validated pydantic schema and returns the stored
  record with its id and creation timestamp.
- ``update_*`` takes a dict of fields to merge and returns the updated
  record, or ``None`` when the id is absent.
- ``delete_*`` returns ``True`` whether or not the row existed.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional

from bachub.models import (
    Announcement,
    Comment,
    Document,
    Favorite,
    Rating,
    Setting,
    Subject,
    User,
    UserSession,
)
from bachub.schemas import (
    AnnouncementCreate,
    CommentCreate,
    DocumentCreate,
    FavoriteCreate,
    RatingCreate,
    SettingCreate,
    SubjectCreate,
    UserCreate,
)


class Storage(ABC):

    # ==================== Users ====================

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup"""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup"""

    @abstractmethod
    async def get_users(self) -> List[User]: ...

    @abstractmethod
    async def create_user(self, data: UserCreate) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    async def delete_user(self, user_id: int) -> bool: ...

    # ==================== Subjects ====================

    @abstractmethod
    async def get_subject(self, subject_id: int) -> Optional[Subject]: ...

    @abstractmethod
    async def get_subject_by_name(self, name: str) -> Optional[Subject]: ...

    @abstractmethod
    async def get_subjects(self) -> List[Subject]: ...

    @abstractmethod
    async def create_subject(self, data: SubjectCreate) -> Subject: ...

    @abstractmethod
    async def update_subject(self, subject_id: int, fields: Dict[str, Any]) -> Optional[Subject]: ...

    @abstractmethod
    async def delete_subject(self, subject_id: int) -> bool: ...

    # ==================== Documents ====================

    @abstractmethod
    async def get_document(self, document_id: int) -> Optional[Document]: ...

    @abstractmethod
    async def get_documents(
        self,
        subject_id: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Document]:
        """
        Documents newest first. Filters combine with AND; ``search`` is a
        case-insensitive substring match against title or description.
        """

    async def get_documents_by_subject(self, subject_id: int) -> List[Document]:
        return await self.get_documents(subject_id=subject_id)

    async def get_documents_by_year(self, year: int) -> List[Document]:
        return await self.get_documents(year=year)

    @abstractmethod
    async def create_document(self, data: DocumentCreate) -> Document: ...

    @abstractmethod
    async def update_document(self, document_id: int, fields: Dict[str, Any]) -> Optional[Document]: ...

    @abstractmethod
    async def delete_document(self, document_id: int) -> bool: ...

    @abstractmethod
    async def increment_download_count(self, document_id: int) -> None:
        """Add one to ``downloads``; no-op for a missing document"""

    # ==================== Ratings ====================

    @abstractmethod
    async def get_rating(self, rating_id: int) -> Optional[Rating]: ...

    @abstractmethod
    async def get_ratings_by_document(self, document_id: int) -> List[Rating]: ...

    @abstractmethod
    async def get_ratings_by_user(self, user_id: int) -> List[Rating]: ...

    @abstractmethod
    async def get_user_document_rating(self, user_id: int, document_id: int) -> Optional[Rating]: ...

    @abstractmethod
    async def create_rating(self, data: RatingCreate) -> Rating:
        """Upsert: overwrite the user's existing rating of the document, else insert"""

    @abstractmethod
    async def update_rating(self, rating_id: int, fields: Dict[str, Any]) -> Optional[Rating]: ...

    @abstractmethod
    async def delete_rating(self, rating_id: int) -> bool: ...

    @abstractmethod
    async def get_average_rating(self, document_id: int) -> float:
        """Arithmetic mean of the document's ratings, 0 when it has none"""

    @abstractmethod
    async def count_ratings(self, document_id: Optional[int] = None) -> int: ...

    # ==================== Comments ====================

    @abstractmethod
    async def get_comment(self, comment_id: int) -> Optional[Comment]: ...

    @abstractmethod
    async def get_comments_by_document(self, document_id: int) -> List[Comment]:
        """Newest first"""

    @abstractmethod
    async def get_comments_by_user(self, user_id: int) -> List[Comment]: ...

    @abstractmethod
    async def create_comment(self, data: CommentCreate) -> Comment: ...

    @abstractmethod
    async def update_comment(self, comment_id: int, fields: Dict[str, Any]) -> Optional[Comment]: ...

    @abstractmethod
    async def delete_comment(self, comment_id: int) -> bool: ...

    @abstractmethod
    async def count_comments(self, document_id: Optional[int] = None) -> int: ...

    # ==================== Favorites ====================

    @abstractmethod
    async def get_favorite(self, favorite_id: int) -> Optional[Favorite]: ...

    @abstractmethod
    async def get_favorites_by_user(self, user_id: int) -> List[Favorite]: ...

    @abstractmethod
    async def get_favorites_by_document(self, document_id: int) -> List[Favorite]: ...

    @abstractmethod
    async def get_favorite_by_user_and_document(self, user_id: int, document_id: int) -> Optional[Favorite]: ...

    @abstractmethod
    async def create_favorite(self, data: FavoriteCreate) -> Favorite:
        """Raises DuplicateFavoriteError when the pair already exists"""

    @abstractmethod
    async def delete_favorite(self, favorite_id: int) -> bool: ...

    # ==================== Announcements ====================

    @abstractmethod
    async def get_announcement(self, announcement_id: int) -> Optional[Announcement]: ...

    @abstractmethod
    async def get_announcements(self, active_only: bool = False) -> List[Announcement]:
        """Newest first"""

    @abstractmethod
    async def create_announcement(self, data: AnnouncementCreate) -> Announcement: ...

    @abstractmethod
    async def update_announcement(self, announcement_id: int, fields: Dict[str, Any]) -> Optional[Announcement]: ...

    @abstractmethod
    async def delete_announcement(self, announcement_id: int) -> bool: ...

    # ==================== Settings ====================

    @abstractmethod
    async def get_setting(self, key: str) -> Optional[Setting]: ...

    @abstractmethod
    async def get_settings(self, keys: Optional[List[str]] = None) -> List[Setting]: ...

    @abstractmethod
    async def create_setting(self, data: SettingCreate) -> Setting: ...

    @abstractmethod
    async def update_setting(self, setting_id: int, fields: Dict[str, Any]) -> Optional[Setting]: ...

    @abstractmethod
    async def update_setting_by_key(self, key: str, value: str) -> Setting:
        """Overwrite the value stored under ``key``, creating the setting when missing"""

    @abstractmethod
    async def delete_setting(self, setting_id: int) -> bool: ...

    # ==================== Sessions ====================

    @abstractmethod
    async def create_session(self, user_id: int, ttl: timedelta) -> UserSession: ...

    @abstractmethod
    async def get_session(self, token: str) -> Optional[UserSession]:
        """Live session for ``token``; expired sessions count as absent"""

    @abstractmethod
    async def delete_session(self, token: str) -> bool: ...

    # ==================== Totals ====================

    @abstractmethod
    async def count_users(self) -> int: ...

    @abstractmethod
    async def count_documents(self) -> int: ...

    @abstractmethod
    async def total_downloads(self) -> int: ...

    @abstractmethod
    async def ping(self) -> bool:
        """Cheap round-trip used by the health check"""
