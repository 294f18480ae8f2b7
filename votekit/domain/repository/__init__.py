"""Repository interfaces for votekit.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from votekit.domain.repository.votable import VotableRepository
from votekit.domain.repository.vote import VotableKey, VoteRepository
from votekit.domain.repository.voter import VoterRepository

__all__ = [
    "VoteRepository",
    "VoterRepository",
    "VotableRepository",
    "VotableKey",
]
