"""Vote repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import List, Optional, Sequence

from votekit.domain.model.relation import VoteCounts
from votekit.domain.model.vote import Vote
from votekit.domain.value import VotableId, VotableType, VoteId, VoteItem, VoterId

VotableKey = tuple[VotableType, VotableId]


class VoteRepository(ABC):
    """Repository for Vote entity.

    Defines the contract for vote persistence operations.
    Implementations live in the infrastructure layer.

    Every method is a single storage round-trip.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Run the enclosed operations as one storage transaction.

        The transaction is committed when the block exits normally and
        rolled back when it raises. Exceptions propagate unchanged.
        """
        pass

    @abstractmethod
    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID.

        Args:
            vote_id: The vote's unique identifier

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_voter_and_votable(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
    ) -> Optional[Vote]:
        """Find a voter's vote on a specific item.

        Args:
            voter_id: The voter's ID
            votable_type: Type tag of the item
            votable_id: ID of the item

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> bool:
        """Check whether a voter has voted on an item.

        Args:
            voter_id: The voter's ID
            votable_type: Type tag of the item
            votable_id: ID of the item
            vote_type: Required direction, or None for any

        Returns:
            True if a matching vote exists
        """
        pass

    @abstractmethod
    async def find_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find votes cast by a voter, oldest first.

        Args:
            voter_id: The voter's ID
            votable_type: Restrict to one item type
            vote_type: Restrict to one direction

        Returns:
            List of votes by the voter
        """
        pass

    @abstractmethod
    async def find_by_voter_and_votables(
        self,
        voter_id: VoterId,
        votable_keys: Sequence[VotableKey],
    ) -> List[Vote]:
        """Find a voter's votes on multiple items (batch query).

        Items may be of different types.

        Args:
            voter_id: The voter's ID
            votable_keys: (votable_type, votable_id) pairs to check

        Returns:
            List of votes by the voter on the specified items
        """
        pass

    @abstractmethod
    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find all votes on a specific item, oldest first.

        Args:
            votable_type: Type tag of the item
            votable_id: ID of the item
            vote_type: Restrict to one direction

        Returns:
            List of votes on the item
        """
        pass

    @abstractmethod
    async def save(self, vote: Vote) -> Vote:
        """Save a vote (create).

        Raises:
            IntegrityError: If a vote already exists for this
                voter/votable combination (unique constraint violation)
        """
        pass

    @abstractmethod
    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote.

        Args:
            vote_id: The vote ID to delete

        Returns:
            True if a vote was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        """Count votes on a specific item.

        Returns:
            Number of votes (0 when there are none)
        """
        pass

    @abstractmethod
    async def count_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        """Count votes cast by a voter.

        Returns:
            Number of votes (0 when there are none)
        """
        pass

    @abstractmethod
    async def count_by_votables(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, VoteCounts]:
        """Count total/up/down votes for many items of one type (batch query).

        Returns:
            Mapping of every requested ID to its counts (zeros when no votes)
        """
        pass
