"""
Rate Limiting for TrackerPro API
================================
Implements rate limiting using slowapi (in-memory storage by default).

Only the unauthenticated auth endpoints are limited:
- /auth/login, /auth/admin/login: LOGIN_RATE_LIMIT (brute force protection)
- /auth/register: REGISTER_RATE_LIMIT
- /auth/forgot-password: FORGOT_PASSWORD_RATE_LIMIT

Set RATE_LIMIT_ENABLED=false to switch limits off (tests do this).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from trackerpro.core.config import settings
from trackerpro.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: the client IP address"""
    return f"ip:{get_remote_address(request)}"


# Create limiter instance
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return the standard error envelope with a Retry-After header"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)} on {request.url.path}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please try again later.",
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": str(exc.detail),
                "details": {},
            },
        },
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    """Rate limit for login endpoints"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)


def register_rate_limit():
    return limiter.limit(settings.REGISTER_RATE_LIMIT)


def forgot_password_rate_limit():
    return limiter.limit(settings.FORGOT_PASSWORD_RATE_LIMIT)
