"""Votable repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from votekit.domain.model.capability import Votable
from votekit.domain.value import VotableId, VotableType, VoteItem, VoterId


class VotableRepository(ABC):
    """Queries over votable entities of a registered type.

    Raises:
        UnknownVotableTypeError: From every method when ``votable_type`` has
            no registered entity model
    """

    @abstractmethod
    async def find_by_ids(
        self, votable_type: VotableType, votable_ids: Sequence[VotableId]
    ) -> List[Votable]:
        """Find votables of one type by ID (batch query)."""
        pass

    @abstractmethod
    async def find_voted_by(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Votable]:
        """Find the items of one type a voter has voted on (single query).

        Args:
            voter_id: The voter's ID
            votable_type: Type tag of the items
            vote_type: Restrict to one direction

        Returns:
            Matching votables
        """
        pass

    @abstractmethod
    async def find_with_vote_counts(
        self,
        votable_type: VotableType,
        votable_ids: Optional[Sequence[VotableId]] = None,
    ) -> List[Votable]:
        """Find votables with total/up/down counts attached (single query).

        Args:
            votable_type: Type tag of the items
            votable_ids: Restrict to these IDs, or None for all

        Returns:
            Votables whose ``vote_counts`` is set
        """
        pass
