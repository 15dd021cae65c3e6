"""
Rate Limiting for the Bac-Hub API
=================================
Implements rate limiting using slowapi.

- Every route: RATE_LIMIT_PER_MINUTE per client (default limit)
- /api/login and /api/register: AUTH_RATE_LIMIT (brute force protection)

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at
redis:// when running several workers.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from bachub.core.config import settings
from bachub.core.logging_config import logger


def get_user_identifier(request: Request) -> str:
    """
    Get rate limit key.

    Priority:
    1. Authenticated user ID (set on request.state by the auth dependency)
    2. IP address (for anonymous users)
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom handler for rate limit exceeded errors.
    """
    logger.warning(
        f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
        },
        headers={"Retry-After": "60"},
    )


def auth_rate_limit():
    """Rate limit for auth endpoints"""
    return limiter.limit(settings.AUTH_RATE_LIMIT, key_func=get_user_identifier)
