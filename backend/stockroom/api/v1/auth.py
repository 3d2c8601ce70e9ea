"""Token endpoint for the local identity provider.

With IDENTITY_PROVIDER=firebase, clients sign in through Firebase and send
the ID token; this endpoint then answers 404. With the local provider it
exchanges email and password for a bearer token.

Security considerations:
- constant-time failure path via the provider's dummy bcrypt hash
- one generic message for unknown email and wrong password
- rate limited with the user-creation budget
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockroom.api.deps import Identity
from stockroom.core.config import settings
from stockroom.core.errors import ForbiddenError, NotFoundError
from stockroom.core.rate_limiting import limiter
from stockroom.core.responses import DataResponse
from stockroom.providers.identity.local_adapter import LocalIdentityProvider

router = APIRouter()


class TokenRequest(BaseModel):
    """Request body for POST /auth/token."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Issued bearer token."""

    access_token: str
    token_type: str = "bearer"  # nosec B105


@router.post("/token")
@limiter.limit(lambda: settings.rate_limit_user_create)
async def issue_token(
    request: Request,  # noqa: ARG001 - required by slowapi
    identity: Identity,
    body: TokenRequest,
) -> DataResponse[TokenResponse]:
    """Exchange local credentials for a bearer token."""
    if not isinstance(identity, LocalIdentityProvider):
        raise NotFoundError("Token endpoint")

    token = await identity.sign_in(body.email, body.password)
    if token is None:
        raise ForbiddenError("Invalid email or password", code="INVALID_CREDENTIALS")
    return DataResponse(data=TokenResponse(access_token=token))
