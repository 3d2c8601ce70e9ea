"""Rate limiting configuration using slowapi.

Security: Limits request frequency on endpoints that call out to the
identity provider (user registration, local sign-in).

Requests carrying a bearer token are keyed on a digest of the token so
callers behind a shared IP get separate buckets. Requests without one fall
back to IP-based keying. The token is not verified here; authorization
still runs in the route dependencies.

Usage in routers:
    from stockroom.core.rate_limiting import limiter

    @router.post("")
    @limiter.limit(lambda: settings.rate_limit_user_create)
    async def create_user(request: Request, ...):
        ...
"""

import hashlib

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from stockroom.core.authorization import extract_bearer_token
from stockroom.core.config import settings
from stockroom.core.responses import ErrorDetail, ErrorResponse

_PERIOD_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def _rate_limit_key_func(request: Request) -> str:
    """Get rate limit key from request.

    Key format:
    - Bearer token present: "token:{sha256 prefix}"
    - Otherwise: "ip:{remote address}"

    Args:
        request: The incoming request.

    Returns:
        Rate limit key string.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token:
        # Never key on the raw token; it would sit in limiter storage
        digest = hashlib.sha256(token.encode()).hexdigest()[:32]
        return f"token:{digest}"
    return f"ip:{get_remote_address(request)}"


# Global limiter instance
# Configured with in-memory storage (suitable for single-instance deployment)
# For multi-instance, configure Redis storage via RATELIMIT_STORAGE_URL
limiter = Limiter(
    key_func=_rate_limit_key_func,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Security: Returns 429 Too Many Requests with standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # exc.detail looks like "10 per 1 minute"; fall back to 60 seconds
    try:
        *_, amount, unit = exc.detail.split()
        retry_after = str(int(amount) * _PERIOD_SECONDS[unit.rstrip("s")])
    except (ValueError, AttributeError, KeyError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error=ErrorDetail(
                code="RATE_LIMITED",
                message=f"Rate limit exceeded: {exc.detail}",
            )
        ).model_dump(),
        headers={"Retry-After": retry_after},
    )
