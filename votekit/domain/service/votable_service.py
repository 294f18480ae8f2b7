"""Votable domain service."""

from collections import defaultdict
from typing import Iterable, List, Optional, Sequence

import logfire

from votekit.domain.model.capability import Votable, Voter, VoterPivot
from votekit.domain.model.vote import Vote
from votekit.domain.repository import (
    VotableRepository,
    VoteRepository,
    VoterRepository,
)
from votekit.domain.value import VotableId, VotableType, VoteItem

from .base import (
    Service,
    VotableTypeLike,
    VoteTypeLike,
    loaded_vote_type,
    matches,
    parse_vote_type,
    resolve_votable_type,
)


class VotableService(Service):
    """Domain service for read queries on votable entities.

    Nothing here writes; every answer is computed from the votes table at
    read time or from relations already loaded on the entity.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        voter_repository: VoterRepository,
        votable_repository: VotableRepository,
    ) -> None:
        """Initialize votable service.

        Args:
            vote_repository: Vote repository
            voter_repository: Voter repository
            votable_repository: Votable repository
        """
        self.vote_repository = vote_repository
        self.voter_repository = voter_repository
        self.votable_repository = votable_repository

    async def voters(
        self, votable: Votable, vote_type: Optional[VoteTypeLike] = None
    ) -> List[VoterPivot]:
        """Voters of an item with the direction of their vote.

        Loads the votable's voters relation on first use; later calls are
        answered from memory.
        """
        wanted = parse_vote_type(vote_type)

        if not votable.voters.is_loaded:
            await self.load_voters([votable])

        return [
            pivot
            for pivot in votable.voters
            if wanted is None or pivot.vote_type is wanted
        ]

    async def votes(
        self, votable: Votable, vote_type: Optional[VoteTypeLike] = None
    ) -> List[Vote]:
        """Vote records on an item, oldest first."""
        votable_type, votable_id = votable.votable_key
        return await self.vote_repository.find_by_votable(
            votable_type, votable_id, parse_vote_type(vote_type)
        )

    async def up_voters(self, votable: Votable) -> List[VoterPivot]:
        return await self.voters(votable, VoteItem.UP)

    async def down_voters(self, votable: Votable) -> List[VoterPivot]:
        return await self.voters(votable, VoteItem.DOWN)

    async def load_voters(self, votables: Iterable[Votable]) -> None:
        """Materialize the voters relation of many votables.

        Issues one query per distinct votable type in the batch.
        """
        by_type: dict[VotableType, list[Votable]] = defaultdict(list)
        for votable in votables:
            by_type[type(votable).votable_type].append(votable)

        for votable_type, group in by_type.items():
            with logfire.span(
                "votable_service.load_voters",
                votable_type=str(votable_type),
                count=len(group),
            ):
                voters_by_id = await self.voter_repository.find_voters_of(
                    votable_type, [votable.votable_id for votable in group]
                )
                for votable in group:
                    votable.voters.set(voters_by_id.get(votable.votable_id, []))

    async def is_voted_by(
        self,
        votable: Votable,
        voter: Voter,
        vote_type: Optional[VoteTypeLike] = None,
    ) -> bool:
        """Check whether a voter has voted on this item.

        Answered from memory, without touching storage, when the votable's
        voters or the voter's votes have been loaded.

        Raises:
            InvalidVoteType: If vote_type is given and not a canonical token
        """
        wanted = parse_vote_type(vote_type)

        resolved, found = loaded_vote_type(voter, votable)
        if resolved:
            return matches(found, wanted)

        votable_type, votable_id = votable.votable_key
        return await self.vote_repository.exists(
            voter.voter_id, votable_type, votable_id, wanted
        )

    async def is_up_voted_by(self, votable: Votable, voter: Voter) -> bool:
        return await self.is_voted_by(votable, voter, VoteItem.UP)

    async def is_down_voted_by(self, votable: Votable, voter: Voter) -> bool:
        return await self.is_voted_by(votable, voter, VoteItem.DOWN)

    async def total_votes(self, votable: Votable) -> int:
        """Number of votes in either direction (0 when none)."""
        votable_type, votable_id = votable.votable_key
        return await self.vote_repository.count_by_votable(votable_type, votable_id)

    async def total_up_votes(self, votable: Votable) -> int:
        votable_type, votable_id = votable.votable_key
        return await self.vote_repository.count_by_votable(
            votable_type, votable_id, VoteItem.UP
        )

    async def total_down_votes(self, votable: Votable) -> int:
        votable_type, votable_id = votable.votable_key
        return await self.vote_repository.count_by_votable(
            votable_type, votable_id, VoteItem.DOWN
        )

    async def with_vote_counts(
        self,
        votable_type: VotableTypeLike,
        votable_ids: Optional[Sequence[VotableId]] = None,
    ) -> List[Votable]:
        """Fetch votables with vote counts attached in a single query.

        Raises:
            UnknownVotableTypeError: If the type has no registered model
        """
        resolved_type = resolve_votable_type(votable_type)
        with logfire.span(
            "votable_service.with_vote_counts", votable_type=str(resolved_type)
        ):
            return await self.votable_repository.find_with_vote_counts(
                resolved_type, votable_ids
            )

    async def attach_vote_counts(self, votables: Iterable[Votable]) -> List[Votable]:
        """Attach vote counts to already fetched votables.

        Issues one grouped count query per distinct votable type.
        """
        batch = list(votables)
        by_type: dict[VotableType, list[Votable]] = defaultdict(list)
        for votable in batch:
            by_type[type(votable).votable_type].append(votable)

        for votable_type, group in by_type.items():
            counts = await self.vote_repository.count_by_votables(
                votable_type, [votable.votable_id for votable in group]
            )
            for votable in group:
                votable.attach_vote_counts(counts[votable.votable_id])

        return batch
