"""Mappers for converting between database rows and domain models.

Domain models are immutable Pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict, TypeVar
from uuid import UUID

from pydantic import BaseModel

from votekit.domain.model import Vote
from votekit.domain.value import VotableId, VotableType, VoteId, VoteItem, VoterId

M = TypeVar("M", bound=BaseModel)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_vote(
    row: Dict[str, Any], voter_foreign_key: str, vote_model: type[Vote] = Vote
) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row as dict
        voter_foreign_key: Name of the voter column
        vote_model: Entity class to build

    Returns:
        Vote domain model
    """
    return vote_model(
        id=VoteId(_uuid(row["id"])),
        voter_id=VoterId(_uuid(row[voter_foreign_key])),
        votable_type=VotableType(row["votable_type"]),
        votable_id=VotableId(_uuid(row["votable_id"])),
        vote_type=VoteItem.parse(row["vote_type"]),
        created_at=row["created_at"],
    )


def vote_to_dict(vote: Vote, voter_foreign_key: str) -> Dict[str, Any]:
    """Convert Vote domain model to database dict.

    Args:
        vote: Vote domain model
        voter_foreign_key: Name of the voter column

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": vote.id,
        voter_foreign_key: vote.voter_id,
        "votable_type": vote.votable_type.root,
        "votable_id": vote.votable_id,
        "vote_type": vote.vote_type.value,
        "created_at": vote.created_at,
    }


def row_to_entity(row: Dict[str, Any], model: type[M]) -> M:
    """Convert a host table row to its registered entity model.

    Columns the model does not declare are ignored.
    """
    return model.model_validate(row)
