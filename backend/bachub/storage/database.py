"""
SQLAlchemy-backed storage.

One instance wraps the request's ``AsyncSession``; each write commits on its
own. Uniqueness of (user, document) for ratings and favorites is enforced by
table constraints as well as by the lookups below.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import String, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bachub.core.exceptions import DuplicateFavoriteError, DuplicateRecordError
from bachub.core.logging_config import get_logger
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

logger = get_logger("storage.database")


class DatabaseStorage(Storage):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _add(self, record):
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def _add_unique(self, record, message: str, field: str):
        try:
            return await self._add(record)
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecordError(message, field=field)

    async def _update(self, model, record_id: int, fields: Dict[str, Any],
                      message: str = "Record already exists", field: Optional[str] = None):
        record = await self.session.get(model, record_id)
        if not record:
            return None

        columns = model.__table__.columns.keys()
        for key, value in fields.items():
            if key in columns and key != "id":
                setattr(record, key, value)

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecordError(message, field=field)
        await self.session.refresh(record)
        return record

    async def _delete(self, model, record_id: int) -> bool:
        await self.session.execute(delete(model).where(model.id == record_id))
        await self.session.commit()
        return True

    async def _count(self, query) -> int:
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def _all(self, query) -> list:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _first(self, query):
        result = await self.session.execute(query)
        return result.scalars().first()

    def _matches(self, column, search: str):
        """Case-insensitive literal substring match; SQLite uses the registered casefold()"""
        if self.session.bind.dialect.name == "sqlite":
            return func.casefold(column, type_=String).contains(search.casefold(), autoescape=True)
        return func.lower(column).contains(search.lower(), autoescape=True)

    # ==================== Users ====================

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._first(
            select(User).where(func.lower(User.username) == username.lower())
        )

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._first(
            select(User).where(func.lower(User.email) == email.lower())
        )

    async def get_users(self) -> List[User]:
        return await self._all(select(User).order_by(User.id))

    async def create_user(self, data: UserCreate) -> User:
        if await self.get_user_by_username(data.username):
            raise DuplicateRecordError("Username already exists", field="username")
        if await self.get_user_by_email(data.email):
            raise DuplicateRecordError("Email already exists", field="email")

        return await self._add_unique(User(**data.model_dump()), "User already exists", "username")

    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[User]:
        return await self._update(User, user_id, fields)

    async def delete_user(self, user_id: int) -> bool:
        return await self._delete(User, user_id)

    # ==================== Subjects ====================

    async def get_subject(self, subject_id: int) -> Optional[Subject]:
        return await self.session.get(Subject, subject_id)

    async def get_subject_by_name(self, name: str) -> Optional[Subject]:
        return await self._first(select(Subject).where(Subject.name == name))

    async def get_subjects(self) -> List[Subject]:
        return await self._all(select(Subject).order_by(Subject.id))

    async def create_subject(self, data: SubjectCreate) -> Subject:
        return await self._add_unique(Subject(**data.model_dump()), "Subject already exists", "name")

    async def update_subject(self, subject_id: int, fields: Dict[str, Any]) -> Optional[Subject]:
        return await self._update(Subject, subject_id, fields, "Subject already exists", "name")

    async def delete_subject(self, subject_id: int) -> bool:
        return await self._delete(Subject, subject_id)

    # ==================== Documents ====================

    async def get_document(self, document_id: int) -> Optional[Document]:
        return await self.session.get(Document, document_id)

    async def get_documents(
        self,
        subject_id: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Document]:
        query = select(Document)

        if subject_id is not None:
            query = query.where(Document.subject_id == subject_id)
        if year is not None:
            query = query.where(Document.year == year)
        if search:
            query = query.where(
                or_(self._matches(Document.title, search), self._matches(Document.description, search))
            )

        query = query.order_by(Document.created_at.desc(), Document.id.desc())
        return await self._all(query)

    async def create_document(self, data: DocumentCreate) -> Document:
        return await self._add(Document(**data.model_dump()))

    async def update_document(self, document_id: int, fields: Dict[str, Any]) -> Optional[Document]:
        return await self._update(Document, document_id, fields)

    async def delete_document(self, document_id: int) -> bool:
        return await self._delete(Document, document_id)

    async def increment_download_count(self, document_id: int) -> None:
        await self.session.execute(
            update(Document)
            .where(Document.id == document_id)
            .values(downloads=Document.downloads + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

        # Loaded instances would otherwise keep the pre-increment count
        document = await self.session.get(Document, document_id)
        if document:
            await self.session.refresh(document)

    # ==================== Ratings ====================

    async def get_rating(self, rating_id: int) -> Optional[Rating]:
        return await self.session.get(Rating, rating_id)

    async def get_ratings_by_document(self, document_id: int) -> List[Rating]:
        return await self._all(
            select(Rating).where(Rating.document_id == document_id).order_by(Rating.id)
        )

    async def get_ratings_by_user(self, user_id: int) -> List[Rating]:
        return await self._all(
            select(Rating).where(Rating.user_id == user_id).order_by(Rating.id)
        )

    async def get_user_document_rating(self, user_id: int, document_id: int) -> Optional[Rating]:
        return await self._first(
            select(Rating).where(Rating.user_id == user_id, Rating.document_id == document_id)
        )

    async def create_rating(self, data: RatingCreate) -> Rating:
        existing = await self.get_user_document_rating(data.user_id, data.document_id)
        if existing:
            return await self._update(Rating, existing.id, {"rating": data.rating})

        try:
            return await self._add(Rating(**data.model_dump()))
        except IntegrityError:
            # A concurrent request inserted the same pair first
            await self.session.rollback()
            existing = await self.get_user_document_rating(data.user_id, data.document_id)
            logger.debug(f"Rating insert raced for user {data.user_id} document {data.document_id}")
            return await self._update(Rating, existing.id, {"rating": data.rating})

    async def update_rating(self, rating_id: int, fields: Dict[str, Any]) -> Optional[Rating]:
        return await self._update(Rating, rating_id, fields)

    async def delete_rating(self, rating_id: int) -> bool:
        return await self._delete(Rating, rating_id)

    async def get_average_rating(self, document_id: int) -> float:
        result = await self.session.execute(
            select(func.avg(Rating.rating)).where(Rating.document_id == document_id)
        )
        average = result.scalar()
        return float(average) if average is not None else 0

    async def count_ratings(self, document_id: Optional[int] = None) -> int:
        query = select(func.count(Rating.id))
        if document_id is not None:
            query = query.where(Rating.document_id == document_id)
        return await self._count(query)

    # ==================== Comments ====================

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        return await self.session.get(Comment, comment_id)

    async def get_comments_by_document(self, document_id: int) -> List[Comment]:
        return await self._all(
            select(Comment)
            .where(Comment.document_id == document_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )

    async def get_comments_by_user(self, user_id: int) -> List[Comment]:
        return await self._all(
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )

    async def create_comment(self, data: CommentCreate) -> Comment:
        return await self._add(Comment(**data.model_dump()))

    async def update_comment(self, comment_id: int, fields: Dict[str, Any]) -> Optional[Comment]:
        return await self._update(Comment, comment_id, fields)

    async def delete_comment(self, comment_id: int) -> bool:
        return await self._delete(Comment, comment_id)

    async def count_comments(self, document_id: Optional[int] = None) -> int:
        query = select(func.count(Comment.id))
        if document_id is not None:
            query = query.where(Comment.document_id == document_id)
        return await self._count(query)

    # ==================== Favorites ====================

    async def get_favorite(self, favorite_id: int) -> Optional[Favorite]:
        return await self.session.get(Favorite, favorite_id)

    async def get_favorites_by_user(self, user_id: int) -> List[Favorite]:
        return await self._all(
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )

    async def get_favorites_by_document(self, document_id: int) -> List[Favorite]:
        return await self._all(
            select(Favorite).where(Favorite.document_id == document_id).order_by(Favorite.id)
        )

    async def get_favorite_by_user_and_document(self, user_id: int, document_id: int) -> Optional[Favorite]:
        return await self._first(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.document_id == document_id)
        )

    async def create_favorite(self, data: FavoriteCreate) -> Favorite:
        try:
            return await self._add(Favorite(**data.model_dump()))
        except IntegrityError:
            await self.session.rollback()
            if not await self.get_favorite_by_user_and_document(data.user_id, data.document_id):
                raise
            raise DuplicateFavoriteError(data.user_id, data.document_id)

    async def delete_favorite(self, favorite_id: int) -> bool:
        return await self._delete(Favorite, favorite_id)

    # ==================== Announcements ====================

    async def get_announcement(self, announcement_id: int) -> Optional[Announcement]:
        return await self.session.get(Announcement, announcement_id)

    async def get_announcements(self, active_only: bool = False) -> List[Announcement]:
        query = select(Announcement)
        if active_only:
            query = query.where(Announcement.active.is_(True))
        query = query.order_by(Announcement.created_at.desc(), Announcement.id.desc())
        return await self._all(query)

    async def create_announcement(self, data: AnnouncementCreate) -> Announcement:
        return await self._add(Announcement(**data.model_dump()))

    async def update_announcement(self, announcement_id: int, fields: Dict[str, Any]) -> Optional[Announcement]:
        return await self._update(Announcement, announcement_id, fields)

    async def delete_announcement(self, announcement_id: int) -> bool:
        return await self._delete(Announcement, announcement_id)

    # ==================== Settings ====================

    async def get_setting(self, key: str) -> Optional[Setting]:
        return await self._first(select(Setting).where(Setting.key == key))

    async def get_settings(self, keys: Optional[List[str]] = None) -> List[Setting]:
        query = select(Setting)
        if keys:
            query = query.where(Setting.key.in_(keys))
        return await self._all(query.order_by(Setting.id))

    async def create_setting(self, data: SettingCreate) -> Setting:
        return await self._add_unique(Setting(**data.model_dump()), "Setting already exists", "key")

    async def update_setting(self, setting_id: int, fields: Dict[str, Any]) -> Optional[Setting]:
        return await self._update(Setting, setting_id, {**fields, "updated_at": datetime.utcnow()})

    async def update_setting_by_key(self, key: str, value: str) -> Setting:
        setting = await self.get_setting(key)
        if not setting:
            return await self.create_setting(SettingCreate(key=key, value=value))
        return await self.update_setting(setting.id, {"value": value})

    async def delete_setting(self, setting_id: int) -> bool:
        return await self._delete(Setting, setting_id)

    # ==================== Sessions ====================

    async def create_session(self, user_id: int, ttl: timedelta) -> UserSession:
        now = datetime.utcnow()
        return await self._add(UserSession(
            token=generate_session_token(),
            user_id=user_id,
            created_at=now,
            expires_at=now + ttl,
        ))

    async def get_session(self, token: str) -> Optional[UserSession]:
        session = await self._first(select(UserSession).where(UserSession.token == token))
        if session and session.is_expired():
            await self.delete_session(token)
            return None
        return session

    async def delete_session(self, token: str) -> bool:
        await self.session.execute(delete(UserSession).where(UserSession.token == token))
        await self.session.commit()
        return True

    # ==================== Totals ====================

    async def count_users(self) -> int:
        return await self._count(select(func.count(User.id)))

    async def count_documents(self) -> int:
        return await self._count(select(func.count(Document.id)))

    async def total_downloads(self) -> int:
        return await self._count(select(func.coalesce(func.sum(Document.downloads), 0)))

    async def ping(self) -> bool:
        await self.session.execute(select(1))
        return True
