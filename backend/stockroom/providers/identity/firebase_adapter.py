"""Firebase Auth identity provider adapter.

The firebase-admin SDK is synchronous; every call is pushed to a worker
thread so request handlers never block the event loop. Credentials come from
Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS).
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence

import firebase_admin
from firebase_admin import auth as firebase_auth

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

# firebase_auth.delete_users() accepts at most 1000 uids per call
_DELETE_BATCH_SIZE = 1000

# Custom claim that carries role tags on ID tokens
ROLES_CLAIM = "roles"


def _roles_from_claims(decoded: dict) -> frozenset[str]:
    raw = decoded.get(ROLES_CLAIM) or []
    if isinstance(raw, str):
        raw = [raw]
    return frozenset(str(role) for role in raw)


class FirebaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Firebase Auth.

    Args:
        project_id: Firebase project id. Empty string defers to the
            project of the ambient credentials.
        app: Pre-initialized firebase_admin App (tests inject one).
    """

    def __init__(self, project_id: str = "", app: firebase_admin.App | None = None) -> None:
        self._project_id = project_id
        self._app = app

    @property
    def provider_name(self) -> str:
        return "firebase"

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                options = {"projectId": self._project_id} if self._project_id else None
                self._app = firebase_admin.initialize_app(options=options)
        return self._app

    async def verify_token(self, token: str) -> Principal | None:
        app = self._get_app()
        try:
            decoded = await asyncio.to_thread(
                firebase_auth.verify_id_token, token, app=app, check_revoked=True
            )
        # ExpiredIdTokenError subclasses InvalidIdTokenError; order matters
        except firebase_auth.ExpiredIdTokenError as exc:
            raise TokenExpiredError("ID token has expired") from exc
        except (
            firebase_auth.InvalidIdTokenError,
            firebase_auth.UserDisabledError,
            ValueError,
        ) as exc:
            raise TokenVerificationError("ID token could not be verified") from exc

        uid = str(decoded.get("uid") or decoded.get("sub") or "").strip()
        if not uid:
            return None
        return Principal(uid=uid, roles=_roles_from_claims(decoded), token=token)

    async def create_account(
        self,
        *,
        email: str,
        password: str,
        display_name: str | None = None,
        roles: Iterable[str] = (),
        uid: str | None = None,
    ) -> str:
        app = self._get_app()
        # Firebase assigns a uid unless one is passed
        extra = {"uid": uid} if uid is not None else {}
        try:
            record = await asyncio.to_thread(
                firebase_auth.create_user,
                email=email,
                password=password,
                display_name=display_name,
                app=app,
                **extra,
            )
        except firebase_auth.EmailAlreadyExistsError as exc:
            raise EmailAlreadyExistsError(f"Email '{email}' is already registered") from exc
        except firebase_auth.UidAlreadyExistsError as exc:
            raise AccountAlreadyExistsError(f"uid '{uid}' is already registered") from exc
        except ValueError as exc:
            # The SDK validates email format client-side and raises ValueError
            raise InvalidEmailError(str(exc)) from exc

        try:
            await self.set_roles(record.uid, roles)
        except Exception:
            logger.warning(
                "Removing Firebase account %s after role claims failed", record.uid
            )
            await asyncio.to_thread(firebase_auth.delete_user, record.uid, app=app)
            raise

        return record.uid

    async def set_roles(self, uid: str, roles: Iterable[str]) -> None:
        app = self._get_app()
        claims = {ROLES_CLAIM: sorted(set(roles))}
        try:
            await asyncio.to_thread(
                firebase_auth.set_custom_user_claims, uid, claims, app=app
            )
        except firebase_auth.UserNotFoundError as exc:
            raise AccountNotFoundError(f"No Firebase account for uid '{uid}'") from exc

    async def delete_accounts(self, uids: Sequence[str]) -> None:
        if not uids:
            return
        app = self._get_app()
        for start in range(0, len(uids), _DELETE_BATCH_SIZE):
            batch = list(uids[start : start + _DELETE_BATCH_SIZE])
            result = await asyncio.to_thread(firebase_auth.delete_users, batch, app=app)
            if result.failure_count:
                logger.error(
                    "Firebase failed to delete %d of %d accounts",
                    result.failure_count,
                    len(batch),
                )
