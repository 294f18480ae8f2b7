"""SQLAlchemy table definitions for votekit.

The votes table name and its voter column are configurable, so the table is
built once at startup from VoteSettings instead of at import time.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    Uuid,
)

from votekit.config import VoteSettings
from votekit.domain.value import VoteItem


class VoteSchema:
    """Votes table plus the column names it was configured with."""

    def __init__(self, metadata: MetaData, settings: VoteSettings) -> None:
        self.metadata = metadata
        self.voter_foreign_key = settings.voter_foreign_key
        self.votes = build_votes_table(metadata, settings)

    @property
    def voter_column(self) -> Column:
        return self.votes.c[self.voter_foreign_key]


def build_votes_table(metadata: MetaData, settings: VoteSettings) -> Table:
    """Define the votes table.

    The voter column is a weak reference (no foreign key): the voters table
    belongs to the host application.

    Args:
        metadata: Metadata to attach the table to
        settings: Vote storage settings

    Returns:
        The votes table
    """
    name = settings.votes_table
    voter_fk = settings.voter_foreign_key
    tokens = ", ".join(f"'{item.value}'" for item in VoteItem)

    table = Table(
        name,
        metadata,
        Column("id", Uuid, primary_key=True),
        Column(voter_fk, Uuid, nullable=False),
        Column("votable_type", String(64), nullable=False),
        Column("votable_id", Uuid, nullable=False),
        Column("vote_type", String(16), nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False),
        # One active vote per voter per item
        UniqueConstraint(
            voter_fk, "votable_type", "votable_id", name=f"uq_{name}_voter_votable"
        ),
        CheckConstraint(f"vote_type IN ({tokens})", name=f"ck_{name}_vote_type"),
    )

    Index(f"idx_{name}_{voter_fk}", table.c[voter_fk])
    Index(f"idx_{name}_votable", table.c.votable_type, table.c.votable_id)

    return table
