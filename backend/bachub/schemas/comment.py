from pydantic import Field
from typing import Optional
from datetime import datetime

from bachub.schemas.base import CamelModel
from bachub.schemas.auth import UserPublic


class CommentCreateRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: Optional[int] = None


class CommentCreate(CamelModel):
    document_id: int
    user_id: int
    content: str = Field(..., min_length=1, max_length=5000)
    is_admin_response: bool = False
    parent_id: Optional[int] = None


class CommentUpdate(CamelModel):
    content: Optional[str] = Field(None, min_length=1, max_length=5000)


class CommentResponse(CamelModel):
    id: int
    document_id: int
    user_id: int
    content: str
    is_admin_response: bool
    parent_id: Optional[int] = None
    created_at: datetime


class CommentWithUser(CommentResponse):
    user: Optional[UserPublic] = None
