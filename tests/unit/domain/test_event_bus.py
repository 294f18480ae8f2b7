"""Unit tests for EventBus."""

from uuid import uuid4

import pytest

from votekit.domain.event import CancelVoted, EventBus, Voted, VoteEvent
from votekit.domain.model import Vote
from votekit.domain.value import VoteId, VoteItem


@pytest.fixture
def voted(alice, post) -> Voted:
    vote = Vote(
        id=VoteId(uuid4()),
        voter_id=alice.voter_id,
        votable_type=post.votable_type,
        votable_id=post.votable_id,
        vote_type=VoteItem.UP,
    )
    return Voted(vote=vote, voter=alice, votable=post)


class TestEventBus:
    """Tests for subscribe/publish."""

    @pytest.mark.asyncio
    async def test_publish_reaches_subscribers_of_type(self, voted):
        bus = EventBus()
        received: list[VoteEvent] = []
        cancelled: list[VoteEvent] = []

        async def on_voted(event: VoteEvent) -> None:
            received.append(event)

        async def on_cancel(event: VoteEvent) -> None:
            cancelled.append(event)

        bus.subscribe(Voted, on_voted)
        bus.subscribe(CancelVoted, on_cancel)

        await bus.publish(voted)

        assert received == [voted]
        assert cancelled == []

    @pytest.mark.asyncio
    async def test_failing_handler_is_isolated(self, voted):
        """A raising handler neither propagates nor blocks other handlers."""
        bus = EventBus()
        received: list[VoteEvent] = []

        async def broken(event: VoteEvent) -> None:
            raise RuntimeError("boom")

        async def working(event: VoteEvent) -> None:
            received.append(event)

        bus.subscribe(Voted, broken)
        bus.subscribe(Voted, working)

        await bus.publish(voted)

        assert received == [voted]

    @pytest.mark.asyncio
    async def test_unsubscribe_and_clear(self, voted):
        bus = EventBus()
        received: list[VoteEvent] = []

        async def handler(event: VoteEvent) -> None:
            received.append(event)

        bus.subscribe(Voted, handler)
        bus.unsubscribe(Voted, handler)
        await bus.publish(voted)

        bus.subscribe(Voted, handler)
        bus.clear()
        await bus.publish(voted)

        assert received == []

    def test_event_metadata(self, voted):
        assert voted.event_id
        assert voted.occurred_at is not None
        assert voted.vote.is_up
