"""
In-process storage backed by dicts.

Records are transient ORM instances, so callers see the same types as with
``DatabaseStorage``. Data lives as long as the process; ids restart at 1.
"""

from datetime import datetime, timedelta
from itertools import count
from typing import Any, Dict, List, Optional

from bachub.core.exceptions import DuplicateFavoriteError, DuplicateRecordError
from bachub.core.security import generate_session_token
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
from bachub.storage.base import Storage


def _newest_first(records: list) -> list:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


def _apply(record, fields: Dict[str, Any]):
    columns = record.__table__.columns.keys()
    for key, value in fields.items():
        if key in columns and key != "id":
            setattr(record, key, value)
    return record


class MemoryStorage(Storage):

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.subjects: Dict[int, Subject] = {}
        self.documents: Dict[int, Document] = {}
        self.ratings: Dict[int, Rating] = {}
        self.comments: Dict[int, Comment] = {}
        self.favorites: Dict[int, Favorite] = {}
        self.announcements: Dict[int, Announcement] = {}
        self.settings: Dict[int, Setting] = {}
        self.sessions: Dict[str, UserSession] = {}

        self._ids = {
            name: count(1)
            for name in (
                "users", "subjects", "documents", "ratings", "comments",
                "favorites", "announcements", "settings", "sessions",
            )
        }

    def _next_id(self, table: str) -> int:
        return next(self._ids[table])

    # ==================== Users ====================

    async def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        wanted = username.casefold()
        return next((u for u in self.users.values() if u.username.casefold() == wanted), None)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.casefold()
        return next((u for u in self.users.values() if u.email.casefold() == wanted), None)

    async def get_users(self) -> List[User]:
        return sorted(self.users.values(), key=lambda u: u.id)

    async def create_user(self, data: UserCreate) -> User:
        if await self.get_user_by_username(data.username):
            raise DuplicateRecordError("Username already exists", field="username")
        if await self.get_user_by_email(data.email):
            raise DuplicateRecordError("Email already exists", field="email")

        user = User(
            id=self._next_id("users"),
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.users[user.id] = user
        return user

    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[User]:
        user = self.users.get(user_id)
        if not user:
            return None
        return _apply(user, fields)

    async def delete_user(self, user_id: int) -> bool:
        self.users.pop(user_id, None)
        return True

    # ==================== Subjects ====================

    async def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self.subjects.get(subject_id)

    async def get_subject_by_name(self, name: str) -> Optional[Subject]:
        return next((s for s in self.subjects.values() if s.name == name), None)

    async def get_subjects(self) -> List[Subject]:
        return sorted(self.subjects.values(), key=lambda s: s.id)

    async def create_subject(self, data: SubjectCreate) -> Subject:
        if await self.get_subject_by_name(data.name):
            raise DuplicateRecordError("Subject already exists", field="name")

        subject = Subject(id=self._next_id("subjects"), **data.model_dump())
        self.subjects[subject.id] = subject
        return subject

    async def update_subject(self, subject_id: int, fields: Dict[str, Any]) -> Optional[Subject]:
        subject = self.subjects.get(subject_id)
        if not subject:
            return None
        other = await self.get_subject_by_name(fields["name"]) if fields.get("name") else None
        if other and other.id != subject_id:
            raise DuplicateRecordError("Subject already exists", field="name")
        return _apply(subject, fields)

    async def delete_subject(self, subject_id: int) -> bool:
        self.subjects.pop(subject_id, None)
        return True

    # ==================== Documents ====================

    async def get_document(self, document_id: int) -> Optional[Document]:
        return self.documents.get(document_id)

    async def get_documents(
        self,
        subject_id: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Document]:
        documents = list(self.documents.values())

        if subject_id is not None:
            documents = [d for d in documents if d.subject_id == subject_id]
        if year is not None:
            documents = [d for d in documents if d.year == year]
        if search:
            term = search.casefold()
            documents = [
                d for d in documents
                if term in d.title.casefold() or term in d.description.casefold()
            ]

        return _newest_first(documents)

    async def create_document(self, data: DocumentCreate) -> Document:
        document = Document(
            id=self._next_id("documents"),
            downloads=0,
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.documents[document.id] = document
        return document

    async def update_document(self, document_id: int, fields: Dict[str, Any]) -> Optional[Document]:
        document = self.documents.get(document_id)
        if not document:
            return None
        return _apply(document, fields)

    async def delete_document(self, document_id: int) -> bool:
        self.documents.pop(document_id, None)
        return True

    async def increment_download_count(self, document_id: int) -> None:
        document = self.documents.get(document_id)
        if document:
            document.downloads += 1

    # ==================== Ratings ====================

    async def get_rating(self, rating_id: int) -> Optional[Rating]:
        return self.ratings.get(rating_id)

    async def get_ratings_by_document(self, document_id: int) -> List[Rating]:
        return [r for r in self.ratings.values() if r.document_id == document_id]

    async def get_ratings_by_user(self, user_id: int) -> List[Rating]:
        return [r for r in self.ratings.values() if r.user_id == user_id]

    async def get_user_document_rating(self, user_id: int, document_id: int) -> Optional[Rating]:
        return next(
            (r for r in self.ratings.values() if r.user_id == user_id and r.document_id == document_id),
            None,
        )

    async def create_rating(self, data: RatingCreate) -> Rating:
        existing = await self.get_user_document_rating(data.user_id, data.document_id)
        if existing:
            existing.rating = data.rating
            return existing

        rating = Rating(
            id=self._next_id("ratings"),
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.ratings[rating.id] = rating
        return rating

    async def update_rating(self, rating_id: int, fields: Dict[str, Any]) -> Optional[Rating]:
        rating = self.ratings.get(rating_id)
        if not rating:
            return None
        return _apply(rating, fields)

    async def delete_rating(self, rating_id: int) -> bool:
        self.ratings.pop(rating_id, None)
        return True

    async def get_average_rating(self, document_id: int) -> float:
        ratings = await self.get_ratings_by_document(document_id)
        if not ratings:
            return 0
        return sum(r.rating for r in ratings) / len(ratings)

    async def count_ratings(self, document_id: Optional[int] = None) -> int:
        if document_id is None:
            return len(self.ratings)
        return len(await self.get_ratings_by_document(document_id))

    # ==================== Comments ====================

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.comments.get(comment_id)

    async def get_comments_by_document(self, document_id: int) -> List[Comment]:
        return _newest_first([c for c in self.comments.values() if c.document_id == document_id])

    async def get_comments_by_user(self, user_id: int) -> List[Comment]:
        return _newest_first([c for c in self.comments.values() if c.user_id == user_id])

    async def create_comment(self, data: CommentCreate) -> Comment:
        comment = Comment(
            id=self._next_id("comments"),
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.comments[comment.id] = comment
        return comment

    async def update_comment(self, comment_id: int, fields: Dict[str, Any]) -> Optional[Comment]:
        comment = self.comments.get(comment_id)
        if not comment:
            return None
        return _apply(comment, fields)

    async def delete_comment(self, comment_id: int) -> bool:
        self.comments.pop(comment_id, None)
        return True

    async def count_comments(self, document_id: Optional[int] = None) -> int:
        if document_id is None:
            return len(self.comments)
        return sum(1 for c in self.comments.values() if c.document_id == document_id)

    # ==================== Favorites ====================

    async def get_favorite(self, favorite_id: int) -> Optional[Favorite]:
        return self.favorites.get(favorite_id)

    async def get_favorites_by_user(self, user_id: int) -> List[Favorite]:
        return _newest_first([f for f in self.favorites.values() if f.user_id == user_id])

    async def get_favorites_by_document(self, document_id: int) -> List[Favorite]:
        return [f for f in self.favorites.values() if f.document_id == document_id]

    async def get_favorite_by_user_and_document(self, user_id: int, document_id: int) -> Optional[Favorite]:
        return next(
            (f for f in self.favorites.values() if f.user_id == user_id and f.document_id == document_id),
            None,
        )

    async def create_favorite(self, data: FavoriteCreate) -> Favorite:
        if await self.get_favorite_by_user_and_document(data.user_id, data.document_id):
            raise DuplicateFavoriteError(data.user_id, data.document_id)

        favorite = Favorite(
            id=self._next_id("favorites"),
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.favorites[favorite.id] = favorite
        return favorite

    async def delete_favorite(self, favorite_id: int) -> bool:
        self.favorites.pop(favorite_id, None)
        return True

    # ==================== Announcements ====================

    async def get_announcement(self, announcement_id: int) -> Optional[Announcement]:
        return self.announcements.get(announcement_id)

    async def get_announcements(self, active_only: bool = False) -> List[Announcement]:
        announcements = list(self.announcements.values())
        if active_only:
            announcements = [a for a in announcements if a.active]
        return _newest_first(announcements)

    async def create_announcement(self, data: AnnouncementCreate) -> Announcement:
        announcement = Announcement(
            id=self._next_id("announcements"),
            created_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.announcements[announcement.id] = announcement
        return announcement

    async def update_announcement(self, announcement_id: int, fields: Dict[str, Any]) -> Optional[Announcement]:
        announcement = self.announcements.get(announcement_id)
        if not announcement:
            return None
        return _apply(announcement, fields)

    async def delete_announcement(self, announcement_id: int) -> bool:
        self.announcements.pop(announcement_id, None)
        return True

    # ==================== Settings ====================

    async def get_setting(self, key: str) -> Optional[Setting]:
        return next((s for s in self.settings.values() if s.key == key), None)

    async def get_settings(self, keys: Optional[List[str]] = None) -> List[Setting]:
        settings = sorted(self.settings.values(), key=lambda s: s.id)
        if keys:
            settings = [s for s in settings if s.key in keys]
        return settings

    async def create_setting(self, data: SettingCreate) -> Setting:
        if await self.get_setting(data.key):
            raise DuplicateRecordError("Setting already exists", field="key")

        setting = Setting(
            id=self._next_id("settings"),
            updated_at=datetime.utcnow(),
            **data.model_dump(),
        )
        self.settings[setting.id] = setting
        return setting

    async def update_setting(self, setting_id: int, fields: Dict[str, Any]) -> Optional[Setting]:
        setting = self.settings.get(setting_id)
        if not setting:
            return None
        _apply(setting, fields)
        setting.updated_at = datetime.utcnow()
        return setting

    async def update_setting_by_key(self, key: str, value: str) -> Setting:
        setting = await self.get_setting(key)
        if not setting:
            return await self.create_setting(SettingCreate(key=key, value=value))
        return await self.update_setting(setting.id, {"value": value})

    async def delete_setting(self, setting_id: int) -> bool:
        self.settings.pop(setting_id, None)
        return True

    # ==================== Sessions ====================

    async def create_session(self, user_id: int, ttl: timedelta) -> UserSession:
        now = datetime.utcnow()
        session = UserSession(
            id=self._next_id("sessions"),
            token=generate_session_token(),
            user_id=user_id,
            created_at=now,
            expires_at=now + ttl,
        )
        self.sessions[session.token] = session
        return session

    async def get_session(self, token: str) -> Optional[UserSession]:
        session = self.sessions.get(token)
        if session and session.is_expired():
            del self.sessions[token]
            return None
        return session

    async def delete_session(self, token: str) -> bool:
        self.sessions.pop(token, None)
        return True

    # ==================== Totals ====================

    async def count_users(self) -> int:
        return len(self.users)

    async def count_documents(self) -> int:
        return len(self.documents)

    async def total_downloads(self) -> int:
        return sum(d.downloads for d in self.documents.values())

    async def ping(self) -> bool:
        return True
