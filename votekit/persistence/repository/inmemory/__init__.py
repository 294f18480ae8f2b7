"""In-memory repository implementations for testing."""

from .store import InMemoryVoteStore
from .votable import InMemoryVotableRepository
from .vote import InMemoryVoteRepository
from .voter import InMemoryVoterRepository

__all__ = [
    "InMemoryVoteStore",
    "InMemoryVotableRepository",
    "InMemoryVoteRepository",
    "InMemoryVoterRepository",
]
