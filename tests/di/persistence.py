"""Mock persistence providers for testing."""

from dishka import Scope, provide

from votekit.domain.repository import (
    VotableRepository,
    VoteRepository,
    VoterRepository,
)
from votekit.persistence.repository.inmemory import (
    InMemoryVotableRepository,
    InMemoryVoteRepository,
    InMemoryVoterRepository,
    InMemoryVoteStore,
)
from votekit.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses REQUEST scope to ensure test isolation - each test gets a fresh
    store shared by its three repositories.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_store(self) -> InMemoryVoteStore:
        """Provide the in-memory store backing the repositories."""
        return InMemoryVoteStore()

    @provide(scope=Scope.REQUEST)
    def get_vote_repository(self, store: InMemoryVoteStore) -> VoteRepository:
        """Provide in-memory vote repository."""
        return InMemoryVoteRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_voter_repository(self, store: InMemoryVoteStore) -> VoterRepository:
        """Provide in-memory voter repository."""
        return InMemoryVoterRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_votable_repository(self, store: InMemoryVoteStore) -> VotableRepository:
        """Provide in-memory votable repository."""
        return InMemoryVotableRepository(store)
