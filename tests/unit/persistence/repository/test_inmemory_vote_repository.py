"""Unit tests for InMemoryVoteRepository."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from votekit.domain.model import Vote
from votekit.domain.value import VoteId, VoteItem
from votekit.persistence.repository.inmemory import (
    InMemoryVoteRepository,
    InMemoryVoteStore,
)


def make_vote(voter, votable, vote_type=VoteItem.UP) -> Vote:
    return Vote(
        id=VoteId(uuid4()),
        voter_id=voter.voter_id,
        votable_type=votable.votable_type,
        votable_id=votable.votable_id,
        vote_type=vote_type,
    )


class TestInMemoryVoteRepository:
    """Tests for the in-memory vote repository."""

    @pytest.mark.asyncio
    async def test_duplicate_pair_raises(self, alice, post):
        repo = InMemoryVoteRepository(InMemoryVoteStore())
        await repo.save(make_vote(alice, post))

        with pytest.raises(IntegrityError):
            await repo.save(make_vote(alice, post, VoteItem.DOWN))

    @pytest.mark.asyncio
    async def test_atomic_restores_on_error(self, alice, post):
        store = InMemoryVoteStore()
        repo = InMemoryVoteRepository(store)
        vote = await repo.save(make_vote(alice, post))

        with pytest.raises(RuntimeError):
            async with repo.atomic():
                await repo.delete(vote.id)
                raise RuntimeError("fail")

        assert store.votes == [vote]

    @pytest.mark.asyncio
    async def test_count_by_votables_includes_unvoted(self, alice, bob, post, book):
        repo = InMemoryVoteRepository(InMemoryVoteStore())
        await repo.save(make_vote(alice, post))
        await repo.save(make_vote(bob, post, VoteItem.DOWN))

        counts = await repo.count_by_votables(post.votable_type, [post.votable_id])

        assert counts[post.votable_id].total_votes == 2
        assert counts[post.votable_id].total_down_votes == 1

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        repo = InMemoryVoteRepository(InMemoryVoteStore())

        assert await repo.delete(VoteId(uuid4())) is False
