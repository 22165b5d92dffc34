"""Request rate limiting.

Keys on the client address. Storage is in-process, so each worker counts
separately.

Usage in routers:
    @router.post("/auth/magic-link")
    @limiter.limit(settings.RATE_LIMIT_MAGIC_LINK)
    async def request_magic_link(request: Request, ...):
        ...
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.core.config import settings
from src.core.interfaces.http.exceptions import error_response

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def _retry_after_seconds(exc: RateLimitExceeded) -> str:
    """Window length from a limit such as ``5 per 15 minute``."""
    limit = getattr(exc, "limit", None)
    try:
        return str(limit.limit.get_expiry())
    except AttributeError:
        return "60"


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Render 429 in the standard error envelope."""
    logger.warning(
        f"Rate limit {exc.detail} exceeded by {get_remote_address(request)} "
        f"on {request.url.path}"
    )
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMITED",
        "Too many requests, please try again later",
        headers={"Retry-After": _retry_after_seconds(exc)},
    )
