"""Unit tests for ModelRegistry and the votes table builder."""

import pytest
from sqlalchemy import Column, Integer, MetaData, Table, UniqueConstraint

from votekit.config import VoteSettings
from votekit.domain.error import UnknownVotableTypeError
from votekit.domain.value import VotableType
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.tables import VoteSchema
from votekit.util.error import ConfigurationError
from tests.entities import Book, Post, User, books_table, posts_table, users_table


class TestModelRegistry:
    """Tests for ModelRegistry."""

    def test_lookup_by_votable_type(self):
        registry = ModelRegistry()
        registry.register_voter(User, users_table)
        registry.register_votable(Post, posts_table)
        registry.register_votable(Book, books_table)

        assert registry.voter.model is User
        assert registry.votable(VotableType("book")).table is books_table
        assert registry.votable(Post.votable_type).key is posts_table.c.id
        assert set(registry.votable_types) == {Post.votable_type, Book.votable_type}

    def test_unknown_votable_type(self):
        registry = ModelRegistry()

        with pytest.raises(UnknownVotableTypeError):
            registry.votable(VotableType("video"))

    def test_missing_voter(self):
        with pytest.raises(ConfigurationError):
            ModelRegistry().voter

    def test_composite_key_rejected(self):
        table = Table(
            "pairs",
            MetaData(),
            Column("a", Integer, primary_key=True),
            Column("b", Integer, primary_key=True),
        )

        with pytest.raises(ConfigurationError):
            ModelRegistry().register_votable(Post, table)


class TestVoteSchema:
    """Tests for the configurable votes table."""

    def test_configured_names(self):
        settings = VoteSettings(votes_table="ballots", voter_foreign_key="member_id")
        schema = VoteSchema(MetaData(), settings)

        assert schema.votes.name == "ballots"
        assert schema.voter_column is schema.votes.c.member_id

    def test_one_vote_per_pair_constraint(self):
        schema = VoteSchema(MetaData(), VoteSettings())

        unique = [
            c for c in schema.votes.constraints if isinstance(c, UniqueConstraint)
        ]
        assert [sorted(col.name for col in c.columns) for c in unique] == [
            ["user_id", "votable_id", "votable_type"]
        ]
