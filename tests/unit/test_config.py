"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from votekit.config import Settings, VoteSettings
from votekit.domain.model import Vote


class AuditedVote(Vote):
    """Vote model subclass a host application might configure."""


class TestVoteSettings:
    """Tests for VoteSettings."""

    def test_defaults(self):
        settings = VoteSettings()

        assert settings.votes_table == "votes"
        assert settings.voter_foreign_key == "user_id"
        assert settings.vote_model is Vote

    def test_vote_model_import_string(self):
        settings = VoteSettings(vote_model=f"{__name__}.AuditedVote")

        assert settings.vote_model is AuditedVote

    def test_vote_model_must_subclass_vote(self):
        with pytest.raises(ValidationError):
            VoteSettings(vote_model="collections.OrderedDict")

    @pytest.mark.parametrize("name", ["1votes", "votes; drop", "my-votes"])
    def test_invalid_identifiers(self, name):
        with pytest.raises(ValidationError):
            VoteSettings(votes_table=name)

    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("VOTES__VOTER_FOREIGN_KEY", "member_id")
        monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///:memory:")

        settings = Settings()

        assert settings.votes.voter_foreign_key == "member_id"
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
