"""Local identity provider for development and tests.

Accounts live in process memory and are lost on restart. Tokens are HS256
JWTs signed with AUTH_SECRET and carry roles in a ``roles`` claim, mirroring
the shape of Firebase ID tokens with custom claims.
"""

import asyncio
import logging
import re
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from stockroom.providers.identity.base import IdentityProvider
from stockroom.providers.identity.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    EmailAlreadyExistsError,
    InvalidEmailError,
    TokenExpiredError,
    TokenVerificationError,
)
from stockroom.schemas.auth import Principal

logger = logging.getLogger(__name__)

_AUDIENCE = "stockroom"
_ALGORITHM = "HS256"
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Pre-computed bcrypt hash for timing-safe comparison on unknown emails.
# Security: prevents account enumeration via response time differences.
_DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"


@dataclass
class LocalAccount:
    """In-memory login account.

    Attributes:
        uid: Account id, used as the token subject.
        email: Lowercased login email.
        password_hash: bcrypt hash of the password.
        display_name: Optional display name.
        roles: Role tags copied into issued tokens.
    """

    uid: str
    email: str
    password_hash: bytes
    display_name: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)


class LocalIdentityProvider(IdentityProvider):
    """Identity provider that signs and verifies its own tokens.

    Args:
        secret: HMAC signing secret.
        issuer: Value of the ``iss`` claim.
        token_ttl: Lifetime of issued tokens.
        bcrypt_rounds: bcrypt cost factor for stored passwords.
    """

    def __init__(
        self,
        *,
        secret: str,
        issuer: str = "stockroom",
        token_ttl: timedelta = timedelta(hours=1),
        bcrypt_rounds: int = 12,
    ) -> None:
        if not secret:
            raise ValueError("LocalIdentityProvider requires a non-empty signing secret")
        self._secret = secret
        self._issuer = issuer
        self._token_ttl = token_ttl
        self._bcrypt_rounds = bcrypt_rounds
        self._accounts: dict[str, LocalAccount] = {}

    @property
    def provider_name(self) -> str:
        return "local"

    @property
    def accounts(self) -> dict[str, LocalAccount]:
        """Registered accounts keyed by uid (read-only view for tests)."""
        return dict(self._accounts)

    def issue_token(
        self,
        uid: str,
        roles: Iterable[str] = (),
        *,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a token for uid carrying the given roles.

        Args:
            uid: Subject of the token.
            roles: Role tags for the ``roles`` claim.
            expires_delta: Lifetime override. Negative values produce an
                already-expired token.

        Returns:
            Encoded JWT string.
        """
        now = datetime.now(UTC)
        payload = {
            "sub": uid,
            "roles": sorted(set(roles)),
            "aud": _AUDIENCE,
            "iss": self._issuer,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._token_ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    async def sign_in(self, email: str, password: str) -> str | None:
        """Check a password and issue a token for the matching account.

        Returns:
            Encoded JWT, or None if the email or password is wrong.
        """
        account = next(
            (a for a in self._accounts.values() if a.email == email.lower()), None
        )
        if account is None:
            await asyncio.to_thread(bcrypt.checkpw, password.encode(), _DUMMY_HASH)
            return None
        matches = await asyncio.to_thread(
            bcrypt.checkpw, password.encode(), account.password_hash
        )
        if not matches:
            return None
        return self.issue_token(account.uid, account.roles)

    async def verify_token(self, token: str) -> Principal | None:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=_AUDIENCE,
                issuer=self._issuer,
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError("Token could not be verified") from exc

        uid = str(payload.get("sub") or "").strip()
        if not uid:
            return None
        roles = payload.get("roles") or []
        return Principal(uid=uid, roles=frozenset(str(r) for r in roles), token=token)

    async def create_account(
        self,
        *,
        email: str,
        password: str,
        display_name: str | None = None,
        roles: Iterable[str] = (),
        uid: str | None = None,
    ) -> str:
        normalized = email.strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise InvalidEmailError(f"'{email}' is not a valid email address")
        if any(a.email == normalized for a in self._accounts.values()):
            raise EmailAlreadyExistsError(f"Email '{email}' is already registered")
        if uid is not None and uid in self._accounts:
            raise AccountAlreadyExistsError(f"uid '{uid}' is already registered")

        password_hash = await asyncio.to_thread(
            bcrypt.hashpw, password.encode(), bcrypt.gensalt(rounds=self._bcrypt_rounds)
        )
        if uid is None:
            uid = uuid.uuid4().hex
        self._accounts[uid] = LocalAccount(
            uid=uid,
            email=normalized,
            password_hash=password_hash,
            display_name=display_name,
            roles=frozenset(roles),
        )
        return uid

    async def set_roles(self, uid: str, roles: Iterable[str]) -> None:
        account = self._accounts.get(uid)
        if account is None:
            raise AccountNotFoundError(f"No local account for uid '{uid}'")
        account.roles = frozenset(roles)

    async def delete_accounts(self, uids: Sequence[str]) -> None:
        for uid in uids:
            if self._accounts.pop(uid, None) is None:
                logger.debug("Skipping delete of unknown local account %s", uid)
