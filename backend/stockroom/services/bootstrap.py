"""Startup seeding of the bootstrap admin.

Runs from the application lifespan. With BOOTSTRAP_ADMIN_EMAIL and
BOOTSTRAP_ADMIN_PASSWORD set, an admin with that email exists both in the
local store and at the identity provider once startup completes. Seeding
is idempotent, so it is safe on every restart.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockroom.core.config import Settings
from stockroom.core.errors import BadRequestError
from stockroom.models.user import User
from stockroom.providers.identity.base import IdentityProvider
from stockroom.services.user_service import UserService

logger = logging.getLogger(__name__)


async def seed_bootstrap_admin(
    session_factory: async_sessionmaker[AsyncSession],
    identity_provider: IdentityProvider,
    config: Settings,
) -> User | None:
    """Ensure the configured bootstrap admin can sign in.

    Args:
        session_factory: Factory for the session used by the seeding.
        identity_provider: Provider holding the login accounts.
        config: Settings carrying the bootstrap credentials.

    Returns:
        The admin's local User, or None when no bootstrap admin is
        configured or the email is taken at the provider by another uid.
    """
    email = config.bootstrap_admin_email
    if not email or config.bootstrap_admin_password is None:
        return None

    async with session_factory() as session:
        try:
            user = await UserService(session, identity_provider).ensure_admin(
                email=email,
                password=config.bootstrap_admin_password.get_secret_value(),
            )
        except BadRequestError as exc:
            logger.error("Bootstrap admin %s was not seeded: %s", email, exc.message)
            return None

    logger.info("Bootstrap admin %s ready", user.id)
    return user
