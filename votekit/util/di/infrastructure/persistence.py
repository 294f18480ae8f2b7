"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, from_context, provide
import logfire
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from votekit.config import Settings, VoteSettings
from votekit.domain.repository import (
    VotableRepository,
    VoteRepository,
    VoterRepository,
)
from votekit.persistence.database import create_engine, create_session_factory
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.repository import (
    SqlVotableRepository,
    SqlVoteRepository,
    SqlVoterRepository,
)
from votekit.persistence.tables import VoteSchema
from votekit.util.di.base import ProviderBase
from votekit.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using SQLAlchemy.

    The host application passes its ModelRegistry as container context.
    """

    __is_mock__ = False

    scope = Scope.APP

    registry = from_context(provides=ModelRegistry, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_schema(self, vote_settings: VoteSettings) -> VoteSchema:
        """Provide the votes table built from settings."""
        return VoteSchema(MetaData(), vote_settings)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_vote_repository(
        self, session: AsyncSession, schema: VoteSchema, vote_settings: VoteSettings
    ) -> VoteRepository:
        """Provide Vote repository."""
        return SqlVoteRepository(session, schema, vote_settings.vote_model)

    @provide(scope=Scope.REQUEST)
    def get_voter_repository(
        self, session: AsyncSession, schema: VoteSchema, registry: ModelRegistry
    ) -> VoterRepository:
        """Provide Voter repository."""
        return SqlVoterRepository(session, schema, registry)

    @provide(scope=Scope.REQUEST)
    def get_votable_repository(
        self, session: AsyncSession, schema: VoteSchema, registry: ModelRegistry
    ) -> VotableRepository:
        """Provide Votable repository."""
        return SqlVotableRepository(session, schema, registry)
