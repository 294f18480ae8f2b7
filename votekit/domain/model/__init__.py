"""Domain model entities for votekit."""

from votekit.domain.model.capability import Votable, Voter, VoterPivot
from votekit.domain.model.relation import LoadedRelation, VoteCounts, VoteStatus
from votekit.domain.model.vote import Vote

__all__ = [
    "Vote",
    "Voter",
    "Votable",
    "VoterPivot",
    "LoadedRelation",
    "VoteStatus",
    "VoteCounts",
]
