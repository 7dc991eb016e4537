"""Rate limiting using slowapi."""

from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

from app.config import settings


def get_client_key(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For hop when the proxy is trusted, else the peer address."""
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_key,
    default_limits=[settings.rate_limit],
    storage_uri="memory://",  # In-memory storage
    enabled=settings.rate_limit_enabled,
)


def get_rate_limit_exceeded_handler():
    """Get rate limit exceeded handler."""
    return _rate_limit_exceeded_handler


def rate_limit_dependency(request: Request) -> None:
    """
    Rate limit dependency for FastAPI.

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    # slowapi has no public "check" helper outside its decorator/middleware;
    # _check_request_limit raises RateLimitExceeded when the limit is hit.
    limiter._check_request_limit(request, endpoint_func=None)
