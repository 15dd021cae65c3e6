from pydantic import Field
from typing import Optional
from datetime import datetime

from bachub.schemas.base import CamelModel


class DocumentBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str
    year: int = Field(..., ge=1900, le=2100)
    subject_id: int
    file_name: str = Field(..., min_length=1, max_length=500)
    file_size: int = Field(..., ge=0)


class DocumentCreateRequest(DocumentBase):
    """Admin request body; the uploader is the calling admin"""
    pass


class DocumentCreate(DocumentBase):
    uploaded_by: int


class DocumentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)
    subject_id: Optional[int] = None
    file_name: Optional[str] = Field(None, min_length=1, max_length=500)
    file_size: Optional[int] = Field(None, ge=0)


class DocumentResponse(DocumentBase):
    id: int
    uploaded_by: int
    downloads: int
    created_at: datetime


class DocumentWithSubject(DocumentResponse):
    subject: str
    subject_color: str


class DocumentWithStats(DocumentWithSubject):
    average_rating: float
    rating_count: int
    comment_count: int


class DocumentDetail(DocumentWithStats):
    is_favorite: bool = False
    user_rating: int = 0


class DownloadInfo(CamelModel):
    id: int
    title: str
    file_name: str


class DownloadResponse(CamelModel):
    message: str = "Download started"
    document: DownloadInfo
