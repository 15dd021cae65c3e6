from typing import List

from bachub.schemas.base import CamelModel
from bachub.schemas.document import DocumentWithSubject


class AdminStats(CamelModel):
    """Dashboard totals"""
    total_users: int
    total_documents: int
    total_downloads: int
    total_comments: int
    total_ratings: int
    recent_documents: List[DocumentWithSubject]
    popular_documents: List[DocumentWithSubject]
