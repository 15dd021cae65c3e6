import json
from pydantic import Field, field_validator
from typing import Optional, Any
from datetime import datetime

from bachub.schemas.base import CamelModel


def _to_setting_value(value: Any) -> Any:
    # Structured values (quick links) are stored JSON-encoded
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class SettingCreate(CamelModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: str

    @field_validator('value', mode='before')
    @classmethod
    def encode_value(cls, v):
        return _to_setting_value(v)


class SettingUpsert(SettingCreate):
    """Admin body for POST /admin/settings: create or overwrite by key"""
    pass


class SettingUpdate(CamelModel):
    key: Optional[str] = Field(None, min_length=1, max_length=100)
    value: Optional[str] = None

    @field_validator('value', mode='before')
    @classmethod
    def encode_value(cls, v):
        return _to_setting_value(v)


class SettingResponse(CamelModel):
    id: int
    key: str
    value: str
    updated_at: Optional[datetime] = None
