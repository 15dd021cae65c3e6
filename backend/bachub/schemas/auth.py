from pydantic import EmailStr, Field, model_validator
from typing import Optional, Literal
from datetime import datetime

from bachub.schemas.base import CamelModel


class UserRegister(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    confirm_password: Optional[str] = None
    email: EmailStr
    full_name: str = Field(..., min_length=3, max_length=255)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserCreate(CamelModel):
    """Storage input. ``password`` must already be hashed."""
    username: str = Field(..., min_length=3, max_length=100)
    password: str
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: Literal["user", "admin"] = "user"


class AdminUserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: Literal["user", "admin"] = "user"


class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    password: Optional[str] = Field(None, min_length=6)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Literal["user", "admin"]] = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    full_name: str
    role: str
    created_at: datetime


class UserPublic(CamelModel):
    """Author profile embedded in comments"""
    id: int
    username: str
    full_name: str
    role: str
