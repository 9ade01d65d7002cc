"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from kin.config import Settings
from kin.domain.repository import (
    ChannelRepository,
    FamilyInviteRepository,
    FamilyRepository,
    InviteRepository,
    MembershipRepository,
    UnitOfWork,
    UserRepository,
    VerificationTokenRepository,
)
from kin.persistence.database import create_engine, create_session_factory
from kin.persistence.repository import (
    PostgresChannelRepository,
    PostgresFamilyInviteRepository,
    PostgresFamilyRepository,
    PostgresInviteRepository,
    PostgresMembershipRepository,
    PostgresUserRepository,
    PostgresVerificationTokenRepository,
)
from kin.persistence.unit_of_work import SqlAlchemyUnitOfWork
from kin.util.di.base import ProviderBase
from kin.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
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
        """Provide database session for request scope.

        Reads outside a unit of work are committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        """Provide unit of work bound to the request session."""
        return SqlAlchemyUnitOfWork(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_family_repository(self, session: AsyncSession) -> FamilyRepository:
        """Provide Family repository."""
        return PostgresFamilyRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_membership_repository(
        self, session: AsyncSession
    ) -> MembershipRepository:
        """Provide FamilyMembership repository."""
        return PostgresMembershipRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invite_repository(self, session: AsyncSession) -> InviteRepository:
        """Provide encrypted Invite repository."""
        return PostgresInviteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_family_invite_repository(
        self, session: AsyncSession
    ) -> FamilyInviteRepository:
        """Provide email-bound FamilyInvite repository."""
        return PostgresFamilyInviteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_verification_token_repository(
        self, session: AsyncSession
    ) -> VerificationTokenRepository:
        """Provide EmailVerificationToken repository."""
        return PostgresVerificationTokenRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_channel_repository(self, session: AsyncSession) -> ChannelRepository:
        """Provide Channel repository."""
        return PostgresChannelRepository(session)
