"""ASGI middleware that refuses API requests without a bearer token.

Route dependencies do the full check (token verification, roles), but
FastAPI reads and parses the JSON body before it solves dependencies. A
tokenless write with a malformed body would then surface as a 400
VALIDATION_ERROR. This middleware answers 403 MISSING_TOKEN first, before
the body is read.

Scope:
- Paths under /api/v1/ except the public ones in _PUBLIC_PATHS
- CORS preflight (OPTIONS) passes through untouched
- Only the presence of a bearer credential is checked here; verification
  stays in stockroom.core.authorization

This is a raw ASGI middleware (not BaseHTTPMiddleware) so the request body
is never touched.
"""

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from stockroom.core.authorization import extract_bearer_token
from stockroom.core.errors import MissingTokenError
from stockroom.core.responses import ErrorDetail, ErrorResponse

_PROTECTED_PREFIX = "/api/v1/"

_PUBLIC_PATHS = frozenset({"/api/v1/auth/token"})
"""Endpoints that issue credentials and so cannot require one."""


class MissingTokenMiddleware:
    """Reject protected API requests that carry no bearer token."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize with the next ASGI application.

        Args:
            app: The next ASGI application in the middleware chain.
        """
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not _requires_token(scope):
            await self.app(scope, receive, send)
            return

        if extract_bearer_token(_authorization_header(scope)) is None:
            error = MissingTokenError()
            response = JSONResponse(
                status_code=error.status_code,
                content=ErrorResponse(
                    error=ErrorDetail(code=error.code, message=error.message)
                ).model_dump(),
            )
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def _requires_token(scope: Scope) -> bool:
    path = scope.get("path", "")
    if scope.get("method") == "OPTIONS":
        return False
    return path.startswith(_PROTECTED_PREFIX) and path.rstrip("/") not in _PUBLIC_PATHS


def _authorization_header(scope: Scope) -> str | None:
    """Return the first Authorization header value, decoded as latin-1.

    Args:
        scope: ASGI connection scope with raw headers.

    Returns:
        Header value, or None when absent.
    """
    for header_name, header_value in scope.get("headers", []):
        if header_name.lower() == b"authorization":
            return header_value.decode("latin-1")
    return None
