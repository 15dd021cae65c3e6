from pydantic import Field
from typing import Optional

from bachub.schemas.base import CamelModel


class SubjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., min_length=1, max_length=30)


class SubjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=30)


class SubjectResponse(CamelModel):
    id: int
    name: str
    color: str
