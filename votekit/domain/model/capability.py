"""Voter and Votable capabilities.

Concrete entity models opt in by inheriting from ``Voter`` and/or
``Votable`` and implementing the identity properties. The services operate
only against these two classes.

Example:
    class User(Voter):
        id: UUID
        name: str

        @property
        def voter_id(self) -> VoterId:
            return VoterId(self.id)
"""

from abc import abstractmethod
from datetime import datetime
from typing import ClassVar, Optional

from pydantic import PrivateAttr

from votekit.domain.model.common import DomainModel
from votekit.domain.model.relation import LoadedRelation, VoteCounts, VoteStatus
from votekit.domain.model.vote import Vote
from votekit.domain.value import VotableId, VotableType, VoteItem, VoterId


class Voter(DomainModel):
    """Capability of entities that cast votes.

    ``voter_id`` must be a UUID: the votes table stores it in a UUID column,
    so host tables with integer or string keys are not supported.
    """

    _votes: LoadedRelation[Vote] = PrivateAttr(
        default_factory=lambda: LoadedRelation("votes")
    )

    @property
    @abstractmethod
    def voter_id(self) -> VoterId:
        """Identifier stored in the votes table's voter column."""

    @property
    def votes(self) -> LoadedRelation[Vote]:
        """Cached votes relation (unloaded until eager-loaded)."""
        return self._votes


class VoterPivot(DomainModel):
    """One row of a votable's voters relation.

    ``vote_type`` is the pivot attribute: it belongs to the vote row, not to
    the voter.
    """

    voter: Voter
    vote_type: VoteItem
    voted_at: datetime

    @property
    def voter_id(self) -> VoterId:
        return self.voter.voter_id


class Votable(DomainModel):
    """Capability of entities that receive votes.

    Subclasses set the ``votable_type`` class attribute to their stable tag.
    ``votable_id`` must be a UUID, like ``Voter.voter_id``.
    """

    votable_type: ClassVar[VotableType]

    _voters: LoadedRelation[VoterPivot] = PrivateAttr(
        default_factory=lambda: LoadedRelation("voters")
    )
    _vote_status: Optional[VoteStatus] = PrivateAttr(default=None)
    _vote_counts: Optional[VoteCounts] = PrivateAttr(default=None)

    @property
    @abstractmethod
    def votable_id(self) -> VotableId:
        """Identifier stored in the votes table's votable_id column."""

    @property
    def votable_key(self) -> tuple[VotableType, VotableId]:
        return (type(self).votable_type, self.votable_id)

    @property
    def voters(self) -> LoadedRelation[VoterPivot]:
        """Cached voters relation (unloaded until eager-loaded)."""
        return self._voters

    @property
    def vote_status(self) -> Optional[VoteStatus]:
        """Status attached by ``attach_vote_status_to_votables``."""
        return self._vote_status

    @property
    def vote_counts(self) -> Optional[VoteCounts]:
        """Counts attached by the bulk aggregate query."""
        return self._vote_counts

    def attach_vote_status(self, status: VoteStatus) -> None:
        self._vote_status = status

    def attach_vote_counts(self, counts: VoteCounts) -> None:
        self._vote_counts = counts

    def forget_vote_state(self) -> None:
        """Drop every cached view of this votable's votes."""
        self._voters.unset()
        self._vote_status = None
        self._vote_counts = None
