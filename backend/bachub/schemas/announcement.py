from pydantic import Field
from typing import Optional
from datetime import datetime

from bachub.schemas.base import CamelModel


class AnnouncementCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    active: bool = True


class AnnouncementCreate(AnnouncementCreateRequest):
    created_by: int


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    active: Optional[bool] = None


class AnnouncementResponse(CamelModel):
    id: int
    title: str
    content: str
    active: bool
    created_by: int
    created_at: datetime
