"""
Storage selection.

``get_storage`` is the FastAPI dependency every route uses. ``STORAGE_BACKEND``
chooses between the SQLAlchemy backend (one session per request) and a
process-wide ``MemoryStorage``.
"""

from typing import AsyncGenerator, Optional

from bachub.core.config import settings
from bachub.core.database import AsyncSessionLocal
from bachub.storage.base import Storage
from bachub.storage.memory import MemoryStorage
from bachub.storage.database import DatabaseStorage

_memory_storage: Optional[MemoryStorage] = None


def get_memory_storage() -> MemoryStorage:
    global _memory_storage
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


def reset_memory_storage() -> None:
    """Drop all in-memory data"""
    global _memory_storage
    _memory_storage = None


async def get_storage() -> AsyncGenerator[Storage, None]:
    if settings.STORAGE_BACKEND == "memory":
        yield get_memory_storage()
        return

    async with AsyncSessionLocal() as session:
        try:
            yield DatabaseStorage(session)
        except Exception:
            await session.rollback()
            raise


__all__ = [
    "Storage",
    "MemoryStorage",
    "DatabaseStorage",
    "get_storage",
    "get_memory_storage",
    "reset_memory_storage",
]
