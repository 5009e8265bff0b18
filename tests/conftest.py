"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from config import Settings, get_settings
from tests.dataset import seed_data
from vault.db import tables
from vault.db.repositories import AccountRepository, CategoryRepository
from vault.db.session import create_engine_for_url

# Module-level settings for test setup (reads from .env files)
_test_settings = get_settings()

# Integration tests run against TEST_DATABASE_URL, or a throwaway SQLite file
_test_database_url = _test_settings.test_database_url or (
    f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / f'passvault_test_{os.getpid()}.db'}"
)


@pytest.fixture
def settings() -> Settings:
    """Provide application settings for tests.

    Returns:
        Application settings instance
    """
    return get_settings()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def test_db_schema() -> AsyncGenerator[None]:
    """Set up database schema once for all integration tests."""
    engine = create_engine_for_url(_test_database_url)

    # Drop existing schema first to ensure clean state
    async with engine.begin() as conn:
        await conn.run_sync(tables.metadata.drop_all)
        await conn.run_sync(tables.metadata.create_all)

    yield

    # Drop schema after tests
    async with engine.begin() as conn:
        await conn.run_sync(tables.metadata.drop_all)

    await engine.dispose()

    if _test_database_url.startswith("sqlite"):
        Path(_test_database_url.split("///", 1)[1]).unlink(missing_ok=True)


@pytest_asyncio.fixture(scope="function")
async def db_connection(test_db_schema: None) -> AsyncGenerator[AsyncConnection]:
    """Create a seeded test database connection.

    This fixture reuses the session-scoped schema and creates a transaction
    for each test function, rolling back all changes after the test completes.

    Args:
        test_db_schema: Session-scoped fixture that ensures schema exists
    """
    engine = create_engine_for_url(_test_database_url)

    async with engine.connect() as connection:
        transaction = await connection.begin()
        try:
            await seed_data(connection)
            yield connection
        finally:
            # Only rollback if transaction is still active
            if transaction.is_active:
                await transaction.rollback()

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def committed_engine(test_db_schema: None) -> AsyncGenerator[AsyncEngine]:
    """Provide an engine over a committed copy of the dataset.

    Needed by tests that use several connections at once, which cannot see
    the rolled-back data of ``db_connection``. Only PostgreSQL serves
    concurrent writers, so the fixture skips on SQLite. Every row is deleted
    afterwards.
    """
    if _test_database_url.startswith("sqlite"):
        pytest.skip("Concurrent writers need TEST_DATABASE_URL set to PostgreSQL")

    engine = create_engine_for_url(_test_database_url)

    async with engine.begin() as conn:
        await seed_data(conn)

    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            for table in reversed(tables.metadata.sorted_tables):
                await conn.execute(table.delete())
        await engine.dispose()


@pytest_asyncio.fixture
async def account_repo(db_connection: AsyncConnection) -> AccountRepository:
    """Create account repository fixture."""
    return AccountRepository(db_connection)


@pytest_asyncio.fixture
async def category_repo(db_connection: AsyncConnection) -> CategoryRepository:
    """Create category repository fixture."""
    return CategoryRepository(db_connection)
