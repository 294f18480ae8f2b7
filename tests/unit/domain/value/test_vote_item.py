"""Unit tests for vote value objects."""

import pytest
from pydantic import ValidationError

from votekit.domain.error import InvalidVoteType
from votekit.domain.value import VotableType, VoteItem


class TestVoteItemParse:
    """Tests for VoteItem.parse."""

    @pytest.mark.parametrize("item", list(VoteItem))
    def test_str_parses_back(self, item):
        assert VoteItem.parse(str(item)) is item

    def test_canonical_tokens(self):
        assert VoteItem.parse("up_vote") is VoteItem.UP
        assert VoteItem.parse("down_vote") is VoteItem.DOWN
        assert VoteItem.UP == "up_vote"

    def test_accepts_member(self):
        assert VoteItem.parse(VoteItem.DOWN) is VoteItem.DOWN

    @pytest.mark.parametrize(
        "raw", ["", "UP_VOTE", "up", "Up_Vote", " up_vote", None, 1]
    )
    def test_rejects_anything_else(self, raw):
        with pytest.raises(InvalidVoteType) as exc_info:
            VoteItem.parse(raw)

        assert exc_info.value.value == raw
        assert str(exc_info.value) == f"Unexpected vote type: {raw}"

    def test_invalid_vote_type_is_value_error(self):
        with pytest.raises(ValueError):
            VoteItem.parse("neutral")


class TestVotableType:
    """Tests for VotableType validation."""

    def test_valid_tags(self):
        for tag in ("post", "blog_post", "app.book", "v-2"):
            assert str(VotableType(tag)) == tag

    @pytest.mark.parametrize("tag", ["", "Post", "has space", "x" * 65])
    def test_invalid_tags(self, tag):
        with pytest.raises(ValidationError):
            VotableType(tag)

    def test_equal_by_value(self):
        assert VotableType("post") == VotableType("post")
        assert hash(VotableType("post")) == hash(VotableType("post"))
