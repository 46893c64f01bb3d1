"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from telloom.config import Settings
from telloom.domain.repository import (
    AuthorityProcedures,
    AuthorityStore,
    DirectWritePath,
    InvitationRepository,
    PrivilegedAuthorityStore,
    ProcedureWritePath,
)
from telloom.persistence.database import (
    PrivilegedEngine,
    PrivilegedSession,
    create_engine,
    create_privileged_engine,
    create_session_factory,
)
from telloom.persistence.repository import (
    PostgresAuthorityProcedures,
    PostgresAuthorityStore,
    PostgresDirectWriter,
    PostgresInvitationRepository,
    PostgresPrivilegedAuthorityStore,
    PostgresProcedureWriter,
)
from telloom.util.di.base import ProviderBase
from telloom.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Standard-path lookups run on the row-level restricted connection.
    The bypass path, the procedures, provisioning writes and invitations run
    on the privileged connection.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide standard database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_privileged_engine(self, settings: Settings) -> PrivilegedEngine:
        """Provide privileged database engine."""
        engine = create_privileged_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide standard database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    async def get_privileged_session(
        self, engine: PrivilegedEngine
    ) -> AsyncIterator[PrivilegedSession]:
        """Provide privileged database session for request scope."""
        session_factory = create_session_factory(engine)
        async with session_factory() as session:
            try:
                yield PrivilegedSession(session)
                await session.commit()
                logfire.info("Privileged session committed")
            except Exception as e:
                logfire.warn("Privileged session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_authority_store(self, session: AsyncSession) -> AuthorityStore:
        """Provide standard-path authority store."""
        return PostgresAuthorityStore(session)

    @provide(scope=Scope.REQUEST)
    def get_privileged_authority_store(
        self, session: PrivilegedSession
    ) -> PrivilegedAuthorityStore:
        """Provide bypass-path authority store."""
        return PostgresPrivilegedAuthorityStore(session)

    @provide(scope=Scope.REQUEST)
    def get_authority_procedures(self, session: PrivilegedSession) -> AuthorityProcedures:
        """Provide privileged procedures."""
        return PostgresAuthorityProcedures(session)

    @provide(scope=Scope.REQUEST)
    def get_procedure_write_path(self, session: PrivilegedSession) -> ProcedureWritePath:
        """Provide procedure write path."""
        return PostgresProcedureWriter(session)

    @provide(scope=Scope.REQUEST)
    def get_direct_write_path(self, session: PrivilegedSession) -> DirectWritePath:
        """Provide direct write path."""
        return PostgresDirectWriter(session)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(
        self, session: PrivilegedSession
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session)
