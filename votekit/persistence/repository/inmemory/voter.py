"""In-memory voter repository for testing."""

from typing import List, Sequence

from votekit.domain.model import Voter, VoterPivot
from votekit.domain.repository import VoterRepository
from votekit.domain.value import VotableId, VotableType, VoterId

from .store import InMemoryVoteStore, fresh


class InMemoryVoterRepository(VoterRepository):
    """In-memory implementation of VoterRepository for testing."""

    def __init__(self, store: InMemoryVoteStore) -> None:
        self.store = store

    async def find_by_ids(self, voter_ids: Sequence[VoterId]) -> List[Voter]:
        """Find voters by ID in one call."""
        self.store.hit()
        return [
            fresh(self.store.voters[voter_id])
            for voter_id in voter_ids
            if voter_id in self.store.voters
        ]

    async def find_voters_of(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, List[VoterPivot]]:
        """Find the voters of many items of one type in one call."""
        self.store.hit()
        voters: dict[VotableId, List[VoterPivot]] = {
            votable_id: [] for votable_id in votable_ids
        }
        for vote in sorted(self.store.votes, key=lambda v: v.created_at):
            if vote.votable_type != votable_type or vote.votable_id not in voters:
                continue
            voter = self.store.voters.get(vote.voter_id)
            # Votes of voters the host application has since removed
            if voter is None:
                continue
            voters[vote.votable_id].append(
                VoterPivot(
                    voter=fresh(voter),
                    vote_type=vote.vote_type,
                    voted_at=vote.created_at,
                )
            )
        return voters
