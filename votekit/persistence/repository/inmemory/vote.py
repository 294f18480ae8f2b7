"""In-memory vote repository for testing."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from votekit.domain.model import Vote, VoteCounts
from votekit.domain.repository import VotableKey, VoteRepository
from votekit.domain.value import VotableId, VotableType, VoteId, VoteItem, VoterId

from .store import InMemoryVoteStore


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self, store: InMemoryVoteStore) -> None:
        self.store = store

    @property
    def _votes(self) -> List[Vote]:
        return self.store.votes

    def _ordered(self, votes: List[Vote]) -> List[Vote]:
        return sorted(votes, key=lambda v: v.created_at)

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Restore the vote list if the enclosed block fails."""
        snapshot = list(self._votes)
        try:
            yield
        except Exception:
            self.store.votes[:] = snapshot
            raise

    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID."""
        self.store.hit()
        for vote in self._votes:
            if vote.id == vote_id:
                return vote
        return None

    async def find_by_voter_and_votable(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
    ) -> Optional[Vote]:
        """Find a voter's vote on a specific item."""
        self.store.hit()
        for vote in self._votes:
            if vote.voter_id == voter_id and vote.votable_key == (
                votable_type,
                votable_id,
            ):
                return vote
        return None

    async def exists(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> bool:
        vote = await self.find_by_voter_and_votable(voter_id, votable_type, votable_id)
        return vote is not None and (vote_type is None or vote.vote_type is vote_type)

    async def find_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find votes cast by a voter, oldest first."""
        self.store.hit()
        return self._ordered(
            [
                v
                for v in self._votes
                if v.voter_id == voter_id
                and (votable_type is None or v.votable_type == votable_type)
                and (vote_type is None or v.vote_type is vote_type)
            ]
        )

    async def find_by_voter_and_votables(
        self,
        voter_id: VoterId,
        votable_keys: Sequence[VotableKey],
    ) -> List[Vote]:
        """Find a voter's votes on multiple items in one call."""
        self.store.hit()
        wanted = set(votable_keys)
        return [
            v for v in self._votes if v.voter_id == voter_id and v.votable_key in wanted
        ]

    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find all votes on a specific item, oldest first."""
        self.store.hit()
        return self._ordered(
            [
                v
                for v in self._votes
                if v.votable_key == (votable_type, votable_id)
                and (vote_type is None or v.vote_type is vote_type)
            ]
        )

    async def save(self, vote: Vote) -> Vote:
        """Save a vote (create)."""
        self.store.hit()
        for existing in self._votes:
            if (
                existing.voter_id == vote.voter_id
                and existing.votable_key == vote.votable_key
            ):
                raise IntegrityError("Duplicate vote", None, Exception())
        self._votes.append(vote)
        return vote

    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote."""
        self.store.hit()
        for i, vote in enumerate(self._votes):
            if vote.id == vote_id:
                del self._votes[i]
                return True
        return False

    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        return len(await self.find_by_votable(votable_type, votable_id, vote_type))

    async def count_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        return len(await self.find_by_voter(voter_id, votable_type, vote_type))

    async def count_by_votables(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, VoteCounts]:
        """Count total/up/down votes for many items of one type in one call."""
        self.store.hit()
        counts: dict[VotableId, VoteCounts] = {}
        for votable_id in votable_ids:
            votes = [
                v for v in self._votes if v.votable_key == (votable_type, votable_id)
            ]
            counts[votable_id] = VoteCounts(
                total_votes=len(votes),
                total_up_votes=sum(1 for v in votes if v.is_up),
                total_down_votes=sum(1 for v in votes if v.is_down),
            )
        return counts
