from typing import Optional
from datetime import datetime

from bachub.schemas.base import CamelModel
from bachub.schemas.document import DocumentWithSubject


class FavoriteCreate(CamelModel):
    document_id: int
    user_id: int


class FavoriteResponse(CamelModel):
    id: int
    document_id: int
    user_id: int
    created_at: datetime


class FavoriteWithDocument(FavoriteResponse):
    document: Optional[DocumentWithSubject] = None
