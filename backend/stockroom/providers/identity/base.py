"""Abstract base class for identity providers.

The identity provider owns credentials: it issues and verifies bearer tokens
and stores the login accounts. Local user records reference accounts by the
uid the provider returns.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from stockroom.schemas.auth import Principal


class IdentityProvider(ABC):
    """Provider-neutral identity interface.

    Implementations:
        - FirebaseIdentityProvider: Firebase Auth via firebase-admin
        - LocalIdentityProvider: in-process accounts with HS256 tokens
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier used in logs (e.g. "firebase")."""

    @abstractmethod
    async def verify_token(self, token: str) -> Principal | None:
        """Resolve a bearer token to a principal.

        Args:
            token: Raw bearer token.

        Returns:
            Principal, or None if the token decodes but names no subject.

        Raises:
            TokenExpiredError: Token is past its expiry.
            TokenVerificationError: Token is malformed, forged or revoked.
        """

    @abstractmethod
    async def create_account(
        self,
        *,
        email: str,
        password: str,
        display_name: str | None = None,
        roles: Iterable[str] = (),
        uid: str | None = None,
    ) -> str:
        """Create a login account whose tokens carry the given roles.

        Args:
            email: Login email.
            password: Initial password.
            display_name: Optional display name.
            roles: Role tags carried as token claims.
            uid: Account id to use. None lets the provider assign one;
                passing an existing local user's id re-links the two.

        Returns:
            uid of the new account.

        Raises:
            EmailAlreadyExistsError: Email is already registered.
            AccountAlreadyExistsError: uid is already taken.
            InvalidEmailError: Email was rejected as malformed.
        """

    @abstractmethod
    async def set_roles(self, uid: str, roles: Iterable[str]) -> None:
        """Replace the role claims on an existing account.

        Raises:
            AccountNotFoundError: uid is unknown to the provider.
        """

    @abstractmethod
    async def delete_accounts(self, uids: Sequence[str]) -> None:
        """Delete accounts. Unknown uids are ignored."""
