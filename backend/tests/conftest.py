import uuid
from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from codenote.core.config import settings
from codenote.core.database import build_session_factory
from codenote.core.session_codec import SessionCodec
from codenote.models.base import Base
from codenote.models.login_token import LoginToken

# Test user ID (consistent across tests for predictable auth)
TEST_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
TEST_USER_EMAIL = "test@example.com"

# User B constants (cross-tenant counterpart to TEST_USER_ID)
USER_B_ID = uuid.UUID("00000000-0000-0000-0000-000000000099")
USER_B_EMAIL = "userb@example.com"

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_SESSION_SECRET = "test-session-secret-that-is-at-least-32-characters"  # nosec B105

_PATCH_SEND_EMAIL = "codenote.core.email.send_email"


async def login_tokens_for(db: AsyncSession, user_id: uuid.UUID) -> list[LoginToken]:
    """Every token issued to a user, oldest first, freshly loaded."""
    stmt = (
        select(LoginToken)
        .where(LoginToken.user_id == user_id)
        .order_by(LoginToken.id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create a throwaway SQLite database for one test.

    A file (not :memory:) so concurrent sessions get their own connections.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def codec() -> SessionCodec:
    """Session codec using the test secret."""
    return SessionCodec(TEST_SESSION_SECRET)


@pytest.fixture
def mock_send_email() -> Iterator[AsyncMock]:
    """Replace outbound email with an AsyncMock reporting success."""
    with patch(_PATCH_SEND_EMAIL, new_callable=AsyncMock) as mock:
        mock.return_value = True
        yield mock


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession):
    """Create a test user in the database."""
    from codenote.models import User

    user = User(id=TEST_USER_ID, email=TEST_USER_EMAIL)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    yield user


@pytest_asyncio.fixture
async def user_b(db_session: AsyncSession):
    """Create User B for cross-tenant isolation tests."""
    from codenote.models import User

    user = User(id=USER_B_ID, email=USER_B_EMAIL)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    yield user


def _client_for(cookie: str | None) -> AsyncClient:
    from codenote.main import app

    cookies = {settings.session_cookie_name: cookie} if cookie else None
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=cookies,
    )


@pytest_asyncio.fixture
async def override_db(session_factory) -> AsyncGenerator[None, None]:
    """Point get_db at the test database and the codec at the test secret."""
    from codenote.core.database import get_db
    from codenote.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_secret = settings.session_secret
    settings.session_secret = SecretStr(TEST_SESSION_SECRET)

    yield

    settings.session_secret = original_secret
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    override_db,  # noqa: ARG001 - DB override and test secret
    test_user,
    codec: SessionCodec,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client carrying a valid session cookie for the test user."""
    async with _client_for(codec.encode(test_user.id, test_user.email)) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_user_b(
    override_db,  # noqa: ARG001 - DB override and test secret
    user_b,
    codec: SessionCodec,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client authenticated as User B for cross-tenant tests."""
    async with _client_for(codec.encode(user_b.id, user_b.email)) as ac:
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(
    override_db,  # noqa: ARG001 - DB override and test secret
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client without a session cookie."""
    async with _client_for(None) as ac:
        yield ac


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Disable rate limiting during tests.

    Rate limiting is tested separately; disable for other tests to avoid
    flaky failures from rate limit triggers.
    """
    from codenote.core.rate_limiting import limiter

    original_enabled = limiter.enabled
    limiter.enabled = False

    yield

    limiter.enabled = original_enabled
