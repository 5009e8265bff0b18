"""Database session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import Settings, get_settings


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Enable foreign keys and SAVEPOINT support on SQLite connections.

    The sqlite driver manages BEGIN itself and breaks nested transactions,
    so BEGIN is emitted by SQLAlchemy instead.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_engine_for_url(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for a database URL.

    Args:
        url: SQLAlchemy database URL
        **kwargs: Extra engine options

    Returns:
        Async engine, with SQLite connections configured for constraint checks
    """
    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)
    return engine


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine from settings.

    Args:
        settings: Application settings

    Returns:
        Configured async database engine with connection pooling
    """
    url = str(settings.database_url)
    options: dict[str, Any] = {"echo": settings.database_echo or settings.debug}

    if make_url(url).get_backend_name() == "postgresql":
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            # Disable pool_pre_ping in test environment to avoid event loop closure issues
            pool_pre_ping=settings.environment != "testing",
            pool_recycle=3600,
            connect_args={
                "server_settings": {"jit": "off"},
                "command_timeout": 60,
            },
        )

    return create_engine_for_url(url, **options)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory from engine.

    Args:
        engine: Async database engine

    Returns:
        Configured async session factory
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get the application engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings())
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the application session factory, creating it on first use."""
    global _session_maker
    if _session_maker is None:
        _session_maker = create_sessionmaker(get_engine())
    return _session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Creates a session with automatic transaction management:
    - Commits on successful completion
    - Rolls back on exceptions

    Usage:
        async for session in get_db():
            repo = AccountRepository(await session.connection())
            ...
    """
    async with get_session_maker()() as session:
        try:
            yield session
            if session.in_transaction():
                await session.commit()
        except Exception:
            if session.in_transaction():
                await session.rollback()
            raise


async def dispose_engine() -> None:
    """Dispose the application engine and drop the cached factories."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_maker = None
