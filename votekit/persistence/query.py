"""Query-building helpers for vote aggregates.

``with_vote_counts`` augments a SELECT over a votable table with total, up
and down vote counts, each computed by one correlated subquery, so a list of
votables gets its counts in the same round-trip.
"""

from typing import Optional

from sqlalchemy import ColumnElement, Select, func, select

from votekit.domain.model.relation import VoteCounts
from votekit.domain.value import VotableType, VoteItem
from votekit.persistence.tables import VoteSchema

TOTAL_VOTES = "total_votes"
TOTAL_UP_VOTES = "total_up_votes"
TOTAL_DOWN_VOTES = "total_down_votes"

COUNT_LABELS = (TOTAL_VOTES, TOTAL_UP_VOTES, TOTAL_DOWN_VOTES)


def vote_count_subquery(
    schema: VoteSchema,
    votable_type: VotableType,
    key_column: ColumnElement,
    vote_type: Optional[VoteItem] = None,
) -> ColumnElement[int]:
    """Correlated COUNT of votes for the row identified by ``key_column``."""
    votes = schema.votes
    stmt = select(func.count(votes.c.id)).where(
        votes.c.votable_type == votable_type.root,
        votes.c.votable_id == key_column,
    )
    if vote_type is not None:
        stmt = stmt.where(votes.c.vote_type == vote_type.value)
    return stmt.scalar_subquery()


def with_vote_counts(
    stmt: Select,
    schema: VoteSchema,
    votable_type: VotableType,
    key_column: ColumnElement,
) -> Select:
    """Add total/up/down vote count columns to a votable SELECT.

    Args:
        stmt: SELECT over the votable table
        schema: Votes table schema
        votable_type: Type tag of the selected rows
        key_column: Primary key column of the votable table

    Returns:
        The statement with ``total_votes``, ``total_up_votes`` and
        ``total_down_votes`` columns added
    """
    return stmt.add_columns(
        vote_count_subquery(schema, votable_type, key_column).label(TOTAL_VOTES),
        vote_count_subquery(schema, votable_type, key_column, VoteItem.UP).label(
            TOTAL_UP_VOTES
        ),
        vote_count_subquery(schema, votable_type, key_column, VoteItem.DOWN).label(
            TOTAL_DOWN_VOTES
        ),
    )


def pop_vote_counts(row: dict) -> VoteCounts:
    """Remove the count columns from a row dict and return them."""
    return VoteCounts(
        total_votes=row.pop(TOTAL_VOTES) or 0,
        total_up_votes=row.pop(TOTAL_UP_VOTES) or 0,
        total_down_votes=row.pop(TOTAL_DOWN_VOTES) or 0,
    )
