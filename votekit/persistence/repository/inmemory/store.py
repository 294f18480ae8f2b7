"""Shared in-memory storage for the in-memory repositories."""

from typing import Dict, List, TypeVar

from votekit.domain.model import Votable, Vote, Voter
from votekit.domain.model.common import DomainModel
from votekit.domain.value import VotableId, VotableType, VoterId

M = TypeVar("M", bound=DomainModel)


def fresh(entity: M) -> M:
    """Copy a stored entity the way a new SELECT would return it.

    The copy starts with unloaded relations and no annotations.
    """
    return type(entity).model_validate(entity.model_dump())


class InMemoryVoteStore:
    """Votes, voters and votables held in plain Python containers.

    The three in-memory repositories of one test share a store, the way the
    SQL repositories share a database. ``query_count`` counts repository
    calls, so tests can assert how many round trips an operation needs.
    """

    def __init__(self) -> None:
        self.votes: List[Vote] = []
        self.voters: Dict[VoterId, Voter] = {}
        self.votables: Dict[VotableType, Dict[VotableId, Votable]] = {}
        self.query_count = 0

    def add_voter(self, voter: Voter) -> Voter:
        self.voters[voter.voter_id] = voter
        return voter

    def register_votable_type(self, model: type[Votable]) -> None:
        self.votables.setdefault(model.votable_type, {})

    def add_votable(self, votable: Votable) -> Votable:
        self.register_votable_type(type(votable))
        self.votables[type(votable).votable_type][votable.votable_id] = votable
        return votable

    def hit(self) -> None:
        """Record one storage round trip."""
        self.query_count += 1

    def reset_query_count(self) -> None:
        self.query_count = 0
