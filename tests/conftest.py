"""Shared pytest fixtures.

Tests run against an in-memory SQLite database through aiosqlite. A
StaticPool keeps a single connection alive so the schema created by
create_all() is visible to every session, including the ones the API
opens per request.

Because every session shares that one connection, fixtures commit their
setup data before the API is exercised.
"""

from collections.abc import AsyncGenerator, Iterator
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from catalog.core.auth import hash_password
from catalog.core.background import BackgroundTaskGroup
from catalog.core.database import enable_sqlite_foreign_keys
from catalog.models import Base, Product, TokenScope, User
from catalog.repositories.product_repository import ProductRepository
from catalog.repositories.user_repository import UserRepository
from catalog.services.token_service import TokenService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_EMAIL = "alice@example.com"
TEST_USER_PASSWORD = "pa55word-for-tests"  # nosec B105

# Minimum bcrypt cost keeps fixtures fast
_TEST_BCRYPT_ROUNDS = 4


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a fresh in-memory database with the full schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

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
# Domain fixtures
# =============================================================================


def make_product(**overrides: str) -> Product:
    """Build an unsaved Product with valid defaults."""
    fields = {
        "name": "Trail Runner",
        "description": "Lightweight shoe for rough terrain",
        "category": "Footwear",
        "image_url": "https://img.example.com/trail-runner.png",
        "price": "89.99",
    }
    fields.update(overrides)
    return Product(**fields)


@pytest_asyncio.fixture
async def test_product(db_session: AsyncSession) -> Product:
    """A committed product."""
    product = await ProductRepository.insert(db_session, make_product())
    await db_session.commit()
    return product


async def _create_user(
    db: AsyncSession, *, email: str, activated: bool, username: str = "alice"
) -> User:
    user = await UserRepository.insert(
        db,
        User(
            username=username,
            email=email,
            password_hash=hash_password(TEST_USER_PASSWORD, rounds=_TEST_BCRYPT_ROUNDS),
            activated=activated,
        ),
    )
    await db.commit()
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A committed, activated user with password TEST_USER_PASSWORD."""
    return await _create_user(db_session, email=TEST_USER_EMAIL, activated=True)


@pytest_asyncio.fixture
async def inactive_user(db_session: AsyncSession) -> User:
    """A committed user who has not activated their account."""
    return await _create_user(
        db_session, email="bob@example.com", activated=False, username="bob"
    )


async def issue_token(
    db: AsyncSession, user: User, scope: TokenScope, ttl: timedelta = timedelta(hours=1)
) -> str:
    """Mint, commit and reveal a token for user."""
    token = await TokenService.new(db, user.id, ttl, scope)
    await db.commit()
    return token.reveal()


@pytest_asyncio.fixture
async def auth_headers(db_session: AsyncSession, test_user: User) -> dict[str, str]:
    """Authorization header for the activated test user."""
    token = await issue_token(db_session, test_user, TokenScope.AUTHENTICATION)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def inactive_auth_headers(
    db_session: AsyncSession, inactive_user: User
) -> dict[str, str]:
    """Authorization header for a user who is not activated."""
    token = await issue_token(db_session, inactive_user, TokenScope.AUTHENTICATION)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def sent_emails(monkeypatch: pytest.MonkeyPatch) -> Iterator[AsyncMock]:
    """Replace the activation mailer in every router that uses it."""
    mock = AsyncMock()
    monkeypatch.setattr("catalog.api.v1.users.send_activation_email", mock)
    monkeypatch.setattr("catalog.api.v1.tokens.send_activation_email", mock)
    yield mock


@pytest_asyncio.fixture
async def client(
    db_engine, sent_emails: AsyncMock  # noqa: ARG001 - keeps mail offline
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app and the test database.

    Sets up:
    - Test database connection via dependency override
    - A fresh background task group
    - Rate limiting disabled
    """
    from catalog.core.database import get_db
    from catalog.core.rate_limiting import limiter
    from catalog.main import app

    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Same commit/rollback contract as get_db
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.tasks = BackgroundTaskGroup()
    original_limiter_enabled = limiter.enabled
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await app.state.tasks.drain(timeout=5)
    limiter.enabled = original_limiter_enabled
    app.dependency_overrides.clear()
