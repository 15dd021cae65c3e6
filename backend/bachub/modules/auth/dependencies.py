from fastapi import Depends, Request, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from bachub.core.config import settings
from bachub.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DocumentNotFoundError,
    SessionExpiredError,
)
from bachub.core.logging_config import set_user_id
from bachub.core.security import decode_session_cookie
from bachub.models import Document, User
from bachub.storage import Storage, get_storage

security = HTTPBearer(auto_error=False)


def _session_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Session cookie, falling back to an Authorization: Bearer header"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def _resolve_user(request: Request, token: str, storage: Storage) -> User:
    payload = decode_session_cookie(token)

    session = await storage.get_session(payload["sid"])
    if not session or str(session.user_id) != payload["sub"]:
        raise SessionExpiredError()

    user = await storage.get_user(session.user_id)
    if not user:
        raise AuthenticationError("User not found")

    # Rate limiting keys on the user once known
    request.state.user_id = user.id
    set_user_id(str(user.id))
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage)
) -> User:
    """Get current authenticated user"""
    token = _session_token(request, credentials)
    if not token:
        raise AuthenticationError()

    return await _resolve_user(request, token, storage)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    storage: Storage = Depends(get_storage)
) -> Optional[User]:
    """Get current user, or None for anonymous callers and stale sessions"""
    token = _session_token(request, credentials)
    if not token:
        return None

    try:
        return await _resolve_user(request, token, storage)
    except AuthenticationError:
        return None


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


# ==================== Resource Dependencies ====================

async def get_document_or_404(
    document_id: int = Path(..., description="Document ID"),
    storage: Storage = Depends(get_storage)
) -> Document:
    """Load the document named in the path"""
    document = await storage.get_document(document_id)
    if not document:
        raise DocumentNotFoundError(document_id)
    return document
