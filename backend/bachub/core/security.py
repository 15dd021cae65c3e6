from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
import secrets

from bachub.core.config import settings
from bachub.core.exceptions import AuthenticationError


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def generate_session_token() -> str:
    """Opaque server-side session identifier"""
    return secrets.token_urlsafe(32)


def create_session_cookie(user_id: int, session_token: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign the session reference carried by the login cookie"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_TTL_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "sid": session_token,
        "exp": datetime.utcnow() + expires_delta,
        "type": "session",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_cookie(token: str) -> Dict[str, Any]:
    """Decode and check a session cookie, raising AuthenticationError when unusable"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")

    if payload.get("type") != "session" or not payload.get("sid") or not payload.get("sub"):
        raise AuthenticationError("Invalid session token")

    return payload
