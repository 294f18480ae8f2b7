"""SQL repository implementations."""

from votekit.persistence.repository.votable import SqlVotableRepository
from votekit.persistence.repository.vote import SqlVoteRepository
from votekit.persistence.repository.voter import SqlVoterRepository

__all__ = [
    "SqlVoteRepository",
    "SqlVoterRepository",
    "SqlVotableRepository",
]
