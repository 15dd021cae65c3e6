from fastapi import APIRouter, Depends, status, Request, Response
from datetime import timedelta

from bachub.core.config import settings
from bachub.core.exceptions import AuthenticationError, DuplicateRecordError, InvalidCredentialsError
from bachub.core.security import (
    verify_password,
    get_password_hash,
    create_session_cookie,
    decode_session_cookie,
)
from bachub.core.logging_config import logger, set_user_id
from bachub.core.rate_limiter import auth_rate_limit
from bachub.models import User, UserRole
from bachub.schemas import UserRegister, UserLogin, UserCreate, UserResponse, MessageResponse
from bachub.modules.auth.dependencies import get_current_user
from bachub.storage import Storage, get_storage

router = APIRouter()


async def _start_session(response: Response, user: User, storage: Storage) -> None:
    """Create a server-side session and hand its signed reference to the client"""
    ttl = timedelta(minutes=settings.SESSION_TTL_MINUTES)
    session = await storage.create_session(user.id, ttl)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_cookie(user.id, session.token, ttl),
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    set_user_id(str(user.id))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@auth_rate_limit()
async def register(
    request: Request,
    response: Response,
    user_data: UserRegister,
    storage: Storage = Depends(get_storage)
):
    """Create a student account and sign it in"""
    client_ip = request.client.host if request.client else "unknown"

    if await storage.get_user_by_username(user_data.username):
        logger.log_auth_event(
            event="register",
            success=False,
            username=user_data.username,
            reason="Username already exists",
            client_ip=client_ip
        )
        raise DuplicateRecordError("Username already exists", field="username")

    if await storage.get_user_by_email(user_data.email):
        logger.log_auth_event(
            event="register",
            success=False,
            username=user_data.username,
            reason="Email already registered",
            client_ip=client_ip
        )
        raise DuplicateRecordError("Email already registered", field="email")

    # Self-registration never grants admin
    user = await storage.create_user(UserCreate(
        username=user_data.username,
        password=get_password_hash(user_data.password),
        email=user_data.email,
        full_name=user_data.full_name,
        role=UserRole.USER.value,
    ))

    await _start_session(response, user, storage)

    logger.log_auth_event(
        event="register",
        success=True,
        username=user.username,
        client_ip=client_ip
    )
    return user


@router.post("/login", response_model=UserResponse)
@auth_rate_limit()
async def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    storage: Storage = Depends(get_storage)
):
    """Verify username/password and set the session cookie"""
    client_ip = request.client.host if request.client else "unknown"

    user = await storage.get_user_by_username(credentials.username)

    if not user or not verify_password(credentials.password, user.password):
        logger.log_auth_event(
            event="login",
            success=False,
            username=credentials.username,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise InvalidCredentialsError()

    await _start_session(response, user, storage)

    logger.log_auth_event(
        event="login",
        success=True,
        username=user.username,
        client_ip=client_ip,
        user_role=user.role
    )
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage)
):
    """
    End the current session.

    Always succeeds: a missing or stale cookie is simply cleared.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        try:
            payload = decode_session_cookie(token)
        except AuthenticationError:
            payload = None

        if payload:
            await storage.delete_session(payload["sid"])
            logger.log_auth_event(event="logout", success=True, user_id_ref=payload["sub"])

    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information"""
    return current_user
