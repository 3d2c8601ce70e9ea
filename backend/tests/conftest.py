from collections.abc import AsyncGenerator, Iterator
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from stockroom.models import Base, User, UserRole
from stockroom.providers import factory
from stockroom.providers.identity.local_adapter import LocalIdentityProvider

# In-memory SQLite shared by every session of one test (StaticPool keeps a
# single connection alive for the lifetime of the engine)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

# Identity-provider uids for the seeded staff (consistent across tests)
ADMIN_UID = "admin-uid-0001"
EMPLOYEE_UID = "employee-uid-0002"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create an in-memory test database with the ORM schema.

    Foreign keys are switched on per connection so ON DELETE CASCADE and
    SET NULL behave as they do on PostgreSQL.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# =============================================================================
# Identity Fixtures
# =============================================================================


@pytest.fixture
def identity() -> Iterator[LocalIdentityProvider]:
    """Local identity provider installed as the factory singleton.

    Uses the minimum bcrypt cost so account creation stays fast.

    Yields:
        LocalIdentityProvider instance.
    """
    provider = LocalIdentityProvider(secret=TEST_AUTH_SECRET, bcrypt_rounds=4)
    factory.set_identity_provider(provider)

    yield provider

    factory.reset_providers()


@pytest.fixture
def admin_token(identity: LocalIdentityProvider) -> str:
    """Bearer token for the seeded admin."""
    return identity.issue_token(ADMIN_UID, ["admin"])


@pytest.fixture
def employee_token(identity: LocalIdentityProvider) -> str:
    """Bearer token for the seeded employee."""
    return identity.issue_token(EMPLOYEE_UID, ["employee"])


def auth_header(token: str) -> dict[str, str]:
    """Build an Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Seed Data
# =============================================================================


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Local record for the seeded admin (bootstrap user, no creator)."""
    user = User(
        id=ADMIN_UID,
        email="admin@example.com",
        first_name="Ada",
        last_name="Admin",
        role_links=[UserRole(role="admin")],
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def employee_user(db_session: AsyncSession, admin_user: User) -> User:
    """Local record for the seeded employee, registered by the admin."""
    user = User(
        id=EMPLOYEE_UID,
        email="employee@example.com",
        first_name="Eve",
        last_name="Employee",
        nif="123456789",
        created_by_id=admin_user.id,
        role_links=[UserRole(role="employee")],
    )
    db_session.add(user)
    await db_session.commit()
    return user


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(
    db_engine,
    identity: LocalIdentityProvider,
    admin_user,  # noqa: ARG001 - ensures admin exists
    employee_user,  # noqa: ARG001 - ensures employee exists
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test database and identity provider.

    No credentials are attached; tests pass ``headers=auth_header(token)``.

    Args:
        db_engine: Test database engine from db_engine fixture.
        identity: Local identity provider used to verify tokens.
        admin_user: Seeded admin (ensures user exists in DB).
        employee_user: Seeded employee (ensures user exists in DB).

    Yields:
        Configured AsyncClient.
    """
    from stockroom.api.deps import get_identity_provider_dep
    from stockroom.core.database import get_db
    from stockroom.main import app

    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Same commit/rollback contract as get_db, on the test database
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider_dep] = lambda: identity

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Autouse Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Disable rate limiting during tests.

    Security: Rate limiting is tested separately; disable for other tests
    to avoid flaky failures from rate limit triggers.

    Yields:
        None (autouse fixture).
    """
    from stockroom.core.rate_limiting import limiter

    original_enabled = limiter.enabled
    limiter.enabled = False

    yield

    limiter.enabled = original_enabled


@pytest.fixture
def expired_token(identity: LocalIdentityProvider) -> str:
    """Admin token that expired a minute ago."""
    return identity.issue_token(ADMIN_UID, ["admin"], expires_delta=timedelta(minutes=-1))
