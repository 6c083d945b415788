"""Rate limiting configuration using slowapi.

Production with more than one worker MUST use Redis:
RATELIMIT_STORAGE_URI="redis://host:port/db". memory:// counters are
per-process.
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

if (
    settings.environment != "development"
    and settings.ratelimit_storage_uri == "memory://"
):
    logger.warning(
        "ratelimit.memory_storage",
        extra={"environment": settings.environment},
    )

_using_redis = settings.ratelimit_storage_uri.startswith("redis://")

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"],
    storage_uri=settings.ratelimit_storage_uri,
    in_memory_fallback_enabled=_using_redis,
    key_prefix="nanny:",
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    logger.warning(
        "ratelimit.exceeded",
        extra={"client": get_remote_address(request), "limit": exc.detail},
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please slow down.",
            "retry_after": exc.detail,
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


ADMIN_LIMIT = "60/minute"

SIGNUP_LIMIT = "10/minute"

ACCESS_CHECK_LIMIT = "120/minute"

HEALTH_LIMIT = "30/minute"
