"""
Admin user management endpoints.
"""
from fastapi import APIRouter, Depends, status
from typing import List

from bachub.core.exceptions import DuplicateRecordError, SelfDeletionError, UserNotFoundError
from bachub.core.logging_config import logger
from bachub.core.security import get_password_hash
from bachub.models import User
from bachub.modules.auth.dependencies import get_current_admin
from bachub.schemas import AdminUserCreate, MessageResponse, UserCreate, UserResponse, UserUpdate
from bachub.storage import Storage, get_storage

router = APIRouter()


async def _check_unique(storage: Storage, user_id: int, username: str = None, email: str = None):
    if username:
        other = await storage.get_user_by_username(username)
        if other and other.id != user_id:
            raise DuplicateRecordError("Username already exists", field="username")
    if email:
        other = await storage.get_user_by_email(email)
        if other and other.id != user_id:
            raise DuplicateRecordError("Email already registered", field="email")


@router.get("", response_model=List[UserResponse])
async def list_users(
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """List all users (password hashes are never returned)"""
    return await storage.get_users()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: AdminUserCreate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Create an account with any role"""
    await _check_unique(storage, 0, user_data.username, user_data.email)

    user = await storage.create_user(UserCreate(
        **user_data.model_dump(exclude={"password"}),
        password=get_password_hash(user_data.password),
    ))
    logger.log_admin_action("create", "user", user.id, admin_id=current_admin.id)
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    user = await storage.get_user(user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Update profile fields, role or password"""
    fields = user_data.model_dump(exclude_unset=True, exclude_none=True)
    await _check_unique(storage, user_id, fields.get("username"), fields.get("email"))

    if "password" in fields:
        fields["password"] = get_password_hash(fields["password"])

    user = await storage.update_user(user_id, fields)
    if not user:
        raise UserNotFoundError(user_id)

    logger.log_admin_action("update", "user", user_id, admin_id=current_admin.id, fields=sorted(fields))
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_admin: User = Depends(get_current_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete a user. Deleting an unknown id succeeds."""
    if user_id == current_admin.id:
        raise SelfDeletionError()

    await storage.delete_user(user_id)
    logger.log_admin_action("delete", "user", user_id, admin_id=current_admin.id)
    return {"message": "User deleted successfully"}
