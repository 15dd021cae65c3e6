from pydantic import Field
from datetime import datetime

from bachub.schemas.base import CamelModel


class RatingRequest(CamelModel):
    rating: int = Field(..., ge=1, le=5)


class RatingCreate(CamelModel):
    document_id: int
    user_id: int
    rating: int = Field(..., ge=1, le=5)


class RatingResponse(CamelModel):
    id: int
    document_id: int
    user_id: int
    rating: int
    created_at: datetime


class RatingResult(CamelModel):
    rating: RatingResponse
    average_rating: float
    rating_count: int
