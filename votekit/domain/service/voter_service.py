"""Voter domain service."""

from typing import Iterable, List, Optional, Sequence, Union
from uuid import uuid4

import logfire

from votekit.domain.event import CancelVoted, EventBus, Voted, VoteEvent
from votekit.domain.model.capability import Votable, Voter
from votekit.domain.model.relation import VoteStatus
from votekit.domain.model.vote import Vote
from votekit.domain.repository import (
    VotableRepository,
    VoteRepository,
    VoterRepository,
)
from votekit.domain.value import VoteId, VoteItem

from .base import (
    Service,
    VotableTypeLike,
    VoteTypeLike,
    loaded_vote_type,
    matches,
    parse_vote_type,
    resolve_votable_type,
)


class VoterService(Service):
    """Domain service for everything a voter does.

    Per (voter, votable) pair the vote state is one of NoVote, UpVoted or
    DownVoted. Casting over an existing vote deletes the old row and inserts
    a new one (new id) in the same transaction. Events are published after
    the transaction commits.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        voter_repository: VoterRepository,
        votable_repository: VotableRepository,
        event_bus: EventBus,
        vote_model: type[Vote] = Vote,
    ) -> None:
        """Initialize voter service.

        Args:
            vote_repository: Vote repository
            voter_repository: Voter repository
            votable_repository: Votable repository
            event_bus: Bus receiving Voted/CancelVoted events
            vote_model: Entity class used for new vote records
        """
        self.vote_repository = vote_repository
        self.voter_repository = voter_repository
        self.votable_repository = votable_repository
        self.event_bus = event_bus
        self.vote_model = vote_model

    async def vote(
        self, voter: Voter, votable: Votable, vote_type: VoteTypeLike
    ) -> Vote:
        """Cast a vote in the given direction.

        Raises:
            InvalidVoteType: If vote_type is not a canonical token
        """
        item = VoteItem.parse(vote_type)
        if item is VoteItem.UP:
            return await self.up_vote(voter, votable)
        return await self.down_vote(voter, votable)

    async def up_vote(self, voter: Voter, votable: Votable) -> Vote:
        """Cast an up vote, replacing any existing vote."""
        return await self._cast(voter, votable, VoteItem.UP)

    async def down_vote(self, voter: Voter, votable: Votable) -> Vote:
        """Cast a down vote, replacing any existing vote."""
        return await self._cast(voter, votable, VoteItem.DOWN)

    async def _cast(self, voter: Voter, votable: Votable, vote_type: VoteItem) -> Vote:
        votable_type, votable_id = votable.votable_key
        with logfire.span(
            "voter_service.cast",
            voter_id=str(voter.voter_id),
            votable_type=str(votable_type),
            votable_id=str(votable_id),
            vote_type=vote_type.value,
        ):
            events: list[VoteEvent] = []

            async with self.vote_repository.atomic():
                existing = await self.vote_repository.find_by_voter_and_votable(
                    voter.voter_id, votable_type, votable_id
                )
                if existing:
                    await self.vote_repository.delete(existing.id)
                    events.append(
                        CancelVoted(vote=existing, voter=voter, votable=votable)
                    )
                    logfire.info(
                        "Existing vote replaced",
                        vote_id=str(existing.id),
                        previous_vote_type=existing.vote_type.value,
                    )

                vote = self.vote_model(
                    id=VoteId(uuid4()),
                    voter_id=voter.voter_id,
                    votable_type=votable_type,
                    votable_id=votable_id,
                    vote_type=vote_type,
                )
                saved_vote = await self.vote_repository.save(vote)
                events.append(Voted(vote=saved_vote, voter=voter, votable=votable))

            self._forget(voter, votable)
            await self.event_bus.publish_all(events)

            logfire.info("Vote cast", vote_id=str(saved_vote.id))
            return saved_vote

    async def cancel_vote(self, voter: Voter, votable: Votable) -> bool:
        """Remove the voter's vote on an item.

        Idempotent: returns True whether or not a vote existed.
        """
        votable_type, votable_id = votable.votable_key
        with logfire.span(
            "voter_service.cancel_vote",
            voter_id=str(voter.voter_id),
            votable_type=str(votable_type),
            votable_id=str(votable_id),
        ):
            async with self.vote_repository.atomic():
                existing = await self.vote_repository.find_by_voter_and_votable(
                    voter.voter_id, votable_type, votable_id
                )
                if existing:
                    await self.vote_repository.delete(existing.id)

            if not existing:
                logfire.info("No vote to cancel")
                return True

            self._forget(voter, votable)
            await self.event_bus.publish(
                CancelVoted(vote=existing, voter=voter, votable=votable)
            )
            logfire.info("Vote cancelled", vote_id=str(existing.id))
            return True

    async def toggle_up_vote(self, voter: Voter, votable: Votable) -> Union[Vote, bool]:
        """Cancel an existing up vote, otherwise cast one.

        Returns:
            True when cancelled, the new Vote when cast
        """
        if await self.has_up_voted(voter, votable):
            return await self.cancel_vote(voter, votable)
        return await self.up_vote(voter, votable)

    async def toggle_down_vote(
        self, voter: Voter, votable: Votable
    ) -> Union[Vote, bool]:
        """Cancel an existing down vote, otherwise cast one.

        Returns:
            True when cancelled, the new Vote when cast
        """
        if await self.has_down_voted(voter, votable):
            return await self.cancel_vote(voter, votable)
        return await self.down_vote(voter, votable)

    async def has_voted(
        self,
        voter: Voter,
        votable: Votable,
        vote_type: Optional[VoteTypeLike] = None,
    ) -> bool:
        """Check whether the voter has an active vote on an item.

        Answered from memory, without touching storage, when the voter's
        votes or the votable's voters have been loaded.

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

    async def has_up_voted(self, voter: Voter, votable: Votable) -> bool:
        return await self.has_voted(voter, votable, VoteItem.UP)

    async def has_down_voted(self, voter: Voter, votable: Votable) -> bool:
        return await self.has_voted(voter, votable, VoteItem.DOWN)

    async def get_vote(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID."""
        return await self.vote_repository.find_by_id(vote_id)

    async def resolve_vote(
        self, vote: Vote
    ) -> tuple[Optional[Voter], Optional[Votable]]:
        """Look up the voter and the votable a vote points at.

        Either side is None when the host row no longer exists.

        Raises:
            UnknownVotableTypeError: If the vote's type has no registered model
        """
        voters = await self.voter_repository.find_by_ids([vote.voter_id])
        votables = await self.votable_repository.find_by_ids(
            vote.votable_type, [vote.votable_id]
        )
        return (voters[0] if voters else None, votables[0] if votables else None)

    async def load_votes(self, voter: Voter) -> List[Vote]:
        """Materialize the voter's votes relation (one query)."""
        votes = await self.vote_repository.find_by_voter(voter.voter_id)
        voter.votes.set(votes)
        logfire.debug(
            "Voter votes loaded", voter_id=str(voter.voter_id), count=len(votes)
        )
        return votes

    async def votes(
        self,
        voter: Voter,
        votable_type: Optional[VotableTypeLike] = None,
        vote_type: Optional[VoteTypeLike] = None,
    ) -> List[Vote]:
        """List the voter's votes, optionally by item type and direction."""
        type_filter = (
            resolve_votable_type(votable_type) if votable_type is not None else None
        )
        wanted = parse_vote_type(vote_type)

        if voter.votes.is_loaded:
            return [
                vote
                for vote in voter.votes
                if (type_filter is None or vote.votable_type == type_filter)
                and (wanted is None or vote.vote_type is wanted)
            ]

        return await self.vote_repository.find_by_voter(
            voter.voter_id, type_filter, wanted
        )

    async def count_votes(
        self,
        voter: Voter,
        votable_type: Optional[VotableTypeLike] = None,
        vote_type: Optional[VoteTypeLike] = None,
    ) -> int:
        """Count the voter's votes, optionally by item type and direction."""
        if voter.votes.is_loaded:
            return len(await self.votes(voter, votable_type, vote_type))

        type_filter = (
            resolve_votable_type(votable_type) if votable_type is not None else None
        )
        return await self.vote_repository.count_by_voter(
            voter.voter_id, type_filter, parse_vote_type(vote_type)
        )

    async def get_voted_items(
        self,
        voter: Voter,
        votable_type: VotableTypeLike,
        vote_type: Optional[VoteTypeLike] = None,
    ) -> List[Votable]:
        """Items of one type the voter has voted on (single query).

        Raises:
            UnknownVotableTypeError: If the type has no registered model
        """
        return await self.votable_repository.find_voted_by(
            voter.voter_id,
            resolve_votable_type(votable_type),
            parse_vote_type(vote_type),
        )

    async def get_up_voted_items(
        self, voter: Voter, votable_type: VotableTypeLike
    ) -> List[Votable]:
        return await self.get_voted_items(voter, votable_type, VoteItem.UP)

    async def get_down_voted_items(
        self, voter: Voter, votable_type: VotableTypeLike
    ) -> List[Votable]:
        return await self.get_voted_items(voter, votable_type, VoteItem.DOWN)

    async def attach_vote_status_to_votables(
        self, voter: Voter, votables: Iterable[Votable]
    ) -> List[Votable]:
        """Attach has_voted / has_up_voted / has_down_voted to each votable.

        The voter's vote set is read once for the whole batch (or taken from
        the loaded votes relation).

        Returns:
            The same votables, annotated
        """
        batch: Sequence[Votable] = list(votables)
        if not batch:
            return []

        with logfire.span(
            "voter_service.attach_vote_status_to_votables",
            voter_id=str(voter.voter_id),
            count=len(batch),
        ):
            if voter.votes.is_loaded:
                votes: Sequence[Vote] = voter.votes.items
            else:
                # Batch query to fetch all votes at once (avoid N+1)
                votes = await self.vote_repository.find_by_voter_and_votables(
                    voter.voter_id, [votable.votable_key for votable in batch]
                )

            voted = {vote.votable_key: vote for vote in votes}

            for votable in batch:
                vote = voted.get(votable.votable_key)
                votable.attach_vote_status(
                    VoteStatus(
                        has_voted=vote is not None,
                        has_up_voted=vote is not None and vote.is_up,
                        has_down_voted=vote is not None and vote.is_down,
                    )
                )

            return list(batch)

    @staticmethod
    def _forget(voter: Voter, votable: Votable) -> None:
        """Invalidate cached vote state on both handles after a write."""
        voter.votes.unset()
        votable.forget_vote_state()

