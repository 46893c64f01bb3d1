"""Shared statement execution for PostgreSQL repositories."""

from typing import Any

import logfire
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from telloom.domain.error import AuthorityUnavailableError


class PostgresRepository:
    """Base for repositories backed by an async session.

    Every statement runs inside its own SAVEPOINT so a failed statement does
    not abort the surrounding request transaction; the next check or write
    path can still use the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _run(
        self, operation: str, stmt: Any, integrity_passthrough: bool = False
    ) -> Result:
        """Execute a statement, translating failures.

        Args:
            operation: Name used in logs and in the raised error
            stmt: SQLAlchemy statement
            integrity_passthrough: Re-raise IntegrityError unchanged, for
                callers whose contract reports duplicates that way

        Returns:
            Buffered result

        Raises:
            AuthorityUnavailableError: On any database or connection failure
        """
        try:
            async with self.session.begin_nested():
                return await self.session.execute(stmt)
        except IntegrityError as e:
            if integrity_passthrough:
                raise
            logfire.warn("Constraint violation", operation=operation, error=str(e.orig))
            raise AuthorityUnavailableError(operation, str(e.orig)) from e
        except (SQLAlchemyError, OSError) as e:
            logfire.warn("Database call failed", operation=operation, error=str(e))
            raise AuthorityUnavailableError(operation, str(e)) from e
