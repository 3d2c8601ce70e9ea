"""Request authorization pipeline.

Every protected route runs the same fail-fast sequence before its handler:

    START -> TOKEN_EXTRACTED -> PRINCIPAL_RESOLVED -> ROLE_CHECKED -> ATTACHED

1. Extract the bearer token from the Authorization header.
2. Resolve it to a Principal through the identity provider.
3. Check the principal's roles against the roles the route requires.
4. Attach the principal to ``request.state.principal``.

Any failed step raises a ForbiddenError subclass and nothing is attached.

Role policy is any-of: a principal passes when it holds at least one of the
required roles. A route that requires no roles admits any authenticated
principal.
"""

import logging
from collections.abc import Iterable

from fastapi import Request

from stockroom.core.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    NotAuthorizedError,
)
from stockroom.providers.identity.base import IdentityProvider
from stockroom.providers.identity.errors import TokenExpiredError, TokenVerificationError
from stockroom.schemas.auth import Principal

logger = logging.getLogger(__name__)

_BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Pull the credential out of an ``Authorization: Bearer <token>`` header.

    The scheme is matched case-insensitively. Any other scheme, or a header
    without a credential, counts as no token.

    Args:
        authorization: Raw header value, or None when absent.

    Returns:
        The token string, or None.

    Examples:
        >>> extract_bearer_token("Bearer abc.def")
        'abc.def'

        >>> extract_bearer_token("Basic dXNlcjpwYXNz") is None
        True
    """
    if not authorization:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != _BEARER_SCHEME:
        return None
    credential = credential.strip()
    return credential or None


def is_authorized(principal_roles: Iterable[str], required_roles: Iterable[str]) -> bool:
    """Decide whether a principal's roles satisfy a route's requirement.

    Any-of semantics: True when the two sets share at least one role, or
    when no role is required.

    Args:
        principal_roles: Roles claimed by the principal.
        required_roles: Roles the route accepts.

    Returns:
        True if access is granted.
    """
    required = frozenset(required_roles)
    if not required:
        return True
    return not required.isdisjoint(principal_roles)


async def authorize(
    request: Request,
    identity_provider: IdentityProvider,
    required_roles: Iterable[str],
) -> Principal:
    """Run the authorization pipeline for one request.

    Args:
        request: Incoming request; receives ``state.principal`` on success.
        identity_provider: Service that resolves tokens to principals.
        required_roles: Roles accepted by the route (any-of).

    Returns:
        The authorized principal.

    Raises:
        MissingTokenError: No bearer token on the request.
        InvalidTokenError: Token did not resolve to a principal.
        ExpiredTokenError: Identity provider reported the token expired.
        NotAuthorizedError: Principal holds none of the required roles.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise MissingTokenError()

    try:
        principal = await identity_provider.verify_token(token)
    except TokenExpiredError as exc:
        raise ExpiredTokenError() from exc
    except TokenVerificationError as exc:
        raise InvalidTokenError() from exc

    if principal is None:
        raise InvalidTokenError()

    if not is_authorized(principal.roles, required_roles):
        logger.info(
            "Denied %s %s for uid=%s (roles=%s)",
            request.method,
            request.url.path,
            principal.uid,
            sorted(principal.roles),
        )
        raise NotAuthorizedError()

    request.state.principal = principal
    return principal
