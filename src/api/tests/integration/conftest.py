"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when it cannot be reached. Use docker-compose for testing.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from identity.domain.value_objects import Profile, TokenPair
from identity.infrastructure.models import UserModel  # noqa: F401
from identity.infrastructure.user_repository import UserRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from tagging.infrastructure.models import SongTagModel, TagModel  # noqa: F401


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        MOODRING_DB_HOST, MOODRING_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("MOODRING_DB_HOST", "localhost"),
        port=int(os.getenv("MOODRING_DB_PORT", "5432")),
        database=os.getenv("MOODRING_DB_DATABASE", "moodring_test"),
        username=os.getenv("MOODRING_DB_USERNAME", "moodring"),
        password=SecretStr(os.getenv("MOODRING_DB_PASSWORD", "moodring_dev_password")),
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine over a freshly created schema.

    Tables are created before and dropped after each test.
    """
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OperationalError, InterfaceError, DBAPIError, OSError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a session factory for tests that need several sessions."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for integration tests."""
    async with session_factory() as session:
        yield session


def make_tokens(
    access_token: str = "access-1", refresh_token: str | None = "refresh-1"
) -> TokenPair:
    return TokenPair(
        access_token=access_token,
        token_type="Bearer",
        scope="user-read-email",
        expires_in=3600,
        refresh_token=refresh_token,
    )


async def create_user(
    session: AsyncSession, external_id: str, email: str = "a@b.com"
) -> int:
    """Insert a user through the repository and return its id."""
    async with session.begin():
        user = await UserRepository(session).upsert_from_authentication(
            Profile(external_id=external_id, email=email),
            make_tokens(),
            datetime.now(UTC) + timedelta(hours=1),
        )
    return user.id
