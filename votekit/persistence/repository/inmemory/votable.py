"""In-memory votable repository for testing."""

from typing import Dict, List, Optional, Sequence

from votekit.domain.error import UnknownVotableTypeError
from votekit.domain.model import Votable, VoteCounts
from votekit.domain.repository import VotableRepository
from votekit.domain.value import VotableId, VotableType, VoteItem, VoterId

from .store import InMemoryVoteStore, fresh


class InMemoryVotableRepository(VotableRepository):
    """In-memory implementation of VotableRepository for testing."""

    def __init__(self, store: InMemoryVoteStore) -> None:
        self.store = store

    def _table(self, votable_type: VotableType) -> Dict[VotableId, Votable]:
        try:
            return self.store.votables[votable_type]
        except KeyError:
            raise UnknownVotableTypeError(votable_type) from None

    async def find_by_ids(
        self, votable_type: VotableType, votable_ids: Sequence[VotableId]
    ) -> List[Votable]:
        table = self._table(votable_type)
        self.store.hit()
        return [fresh(table[i]) for i in votable_ids if i in table]

    async def find_voted_by(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Votable]:
        """Find the items of one type a voter has voted on in one call."""
        table = self._table(votable_type)
        self.store.hit()
        voted = {
            v.votable_id
            for v in self.store.votes
            if v.voter_id == voter_id
            and v.votable_type == votable_type
            and (vote_type is None or v.vote_type is vote_type)
        }
        return [fresh(votable) for i, votable in table.items() if i in voted]

    async def find_with_vote_counts(
        self,
        votable_type: VotableType,
        votable_ids: Optional[Sequence[VotableId]] = None,
    ) -> List[Votable]:
        """Find votables with total/up/down counts attached in one call."""
        table = self._table(votable_type)
        self.store.hit()
        if votable_ids is None:
            ids = list(table)
        else:
            ids = [i for i in votable_ids if i in table]

        votables: List[Votable] = []
        for votable_id in ids:
            votable = fresh(table[votable_id])
            votes = [
                v
                for v in self.store.votes
                if v.votable_key == (votable_type, votable_id)
            ]
            votable.attach_vote_counts(
                VoteCounts(
                    total_votes=len(votes),
                    total_up_votes=sum(1 for v in votes if v.is_up),
                    total_down_votes=sum(1 for v in votes if v.is_down),
                )
            )
            votables.append(votable)
        return votables
