"""Domain value objects for votekit."""

from votekit.domain.value.identifiers import VotableId, VoteId, VoterId
from votekit.domain.value.types import VotableType, VoteItem

__all__ = [
    # Identifiers
    "VoteId",
    "VoterId",
    "VotableId",
    # Types
    "VoteItem",
    "VotableType",
]
