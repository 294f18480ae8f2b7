"""Voter repository interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from votekit.domain.model.capability import Voter, VoterPivot
from votekit.domain.value import VotableId, VotableType, VoterId


class VoterRepository(ABC):
    """Resolves voter ids stored on votes back to Voter entities."""

    @abstractmethod
    async def find_by_ids(self, voter_ids: Sequence[VoterId]) -> List[Voter]:
        """Find voters by ID (batch query).

        Unknown IDs are skipped.
        """
        pass

    @abstractmethod
    async def find_voters_of(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, List[VoterPivot]]:
        """Find the voters of many items of one type (batch query).

        Each voter is paired with the direction and time of its vote, in vote
        creation order.

        Returns:
            Mapping of every requested ID to its voters (empty when no votes)
        """
        pass
