"""Unit tests for the Voter/Votable capabilities and relation caches."""

from datetime import datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from votekit.domain.error import RelationNotLoadedError
from votekit.domain.model import LoadedRelation, Vote, VoteCounts, VoterPivot, VoteStatus
from votekit.domain.value import VotableId, VoteId, VoteItem, VoterId
from tests.entities import Post


class TestLoadedRelation:
    """Tests for LoadedRelation."""

    def test_unloaded_by_default(self):
        relation: LoadedRelation[int] = LoadedRelation("votes")

        assert not relation.is_loaded
        with pytest.raises(RelationNotLoadedError, match="votes"):
            relation.items

    def test_set_and_unset(self):
        relation: LoadedRelation[int] = LoadedRelation("votes")

        relation.set([1, 2])
        assert relation.is_loaded
        assert list(relation) == [1, 2]
        assert len(relation) == 2

        relation.unset()
        assert not relation.is_loaded

    def test_loaded_empty_is_loaded(self):
        relation: LoadedRelation[int] = LoadedRelation("voters")

        relation.set([])

        assert relation.is_loaded
        assert relation.items == ()


class TestVotable:
    """Tests for annotations carried by Votable handles."""

    def test_votable_key(self, post):
        assert post.votable_key == (Post.votable_type, VotableId(post.id))

    def test_annotations_on_frozen_entity(self, post):
        post.attach_vote_status(VoteStatus(has_voted=True, has_up_voted=True))
        post.attach_vote_counts(VoteCounts(total_votes=1, total_up_votes=1))

        assert post.vote_status.has_up_voted
        assert post.vote_counts.total_votes == 1

        with pytest.raises(ValidationError):
            post.title = "changed"

    def test_forget_vote_state(self, post, alice):
        post.voters.set(
            [VoterPivot(voter=alice, vote_type=VoteItem.UP, voted_at=datetime.now())]
        )
        post.attach_vote_counts(VoteCounts())

        post.forget_vote_state()

        assert not post.voters.is_loaded
        assert post.vote_counts is None
        assert post.vote_status is None

    def test_relations_are_per_instance(self, alice, bob):
        alice.votes.set([])

        assert not bob.votes.is_loaded


class TestVote:
    """Tests for the Vote entity."""

    def test_parses_stored_token(self, post):
        vote = Vote(
            id=VoteId(uuid4()),
            voter_id=VoterId(uuid4()),
            votable_type=Post.votable_type,
            votable_id=post.votable_id,
            vote_type="down_vote",
        )

        assert vote.vote_type is VoteItem.DOWN
        assert vote.is_down and not vote.is_up
        assert vote.votable_key == post.votable_key

    def test_rejects_unknown_token(self, post):
        with pytest.raises(ValidationError, match="Unexpected vote type"):
            Vote(
                id=VoteId(uuid4()),
                voter_id=VoterId(uuid4()),
                votable_type=Post.votable_type,
                votable_id=post.votable_id,
                vote_type="up",
            )

    def test_direction_is_required(self, post):
        with pytest.raises(ValidationError, match="vote_type"):
            Vote(
                id=VoteId(uuid4()),
                voter_id=VoterId(uuid4()),
                votable_type=Post.votable_type,
                votable_id=post.votable_id,
            )
