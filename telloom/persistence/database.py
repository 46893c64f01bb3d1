"""Database connection and session management.

Provides async database engines and session factories for PostgreSQL. The
standard engine connects as a row-level restricted role; the privileged
engine connects as the service role used by the bypass path and by
provisioning writes.
"""

from typing import Any, NewType

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from telloom.config import Settings

# The service-role connection, kept distinct from the standard one in DI
PrivilegedEngine = NewType("PrivilegedEngine", AsyncEngine)
PrivilegedSession = NewType("PrivilegedSession", AsyncSession)


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments shared by both engines.

    Every connection carries a ``statement_timeout`` inside the authority
    call budget, so the database ends slow statements rather than the
    client cancelling them mid-flight.

    Args:
        settings: Application settings

    Returns:
        Keyword arguments for ``create_async_engine``
    """
    return {
        "echo": settings.debug,  # Log SQL queries in debug mode
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": settings.database.pool_size,
        "max_overflow": settings.database.max_overflow,
        "connect_args": {
            "server_settings": {
                "statement_timeout": str(settings.authority.statement_timeout_ms)
            }
        },
    }


def _engine(url: str, settings: Settings) -> AsyncEngine:
    return create_async_engine(url, **engine_options(settings))


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the standard async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return _engine(settings.database.url, settings)


def create_privileged_engine(settings: Settings) -> PrivilegedEngine:
    """Create the privileged (service role) async database engine.

    Args:
        settings: Application settings with privileged database URL

    Returns:
        Configured async engine
    """
    return PrivilegedEngine(_engine(settings.database.privileged_url, settings))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
        autocommit=False,  # Explicit transaction management
    )

