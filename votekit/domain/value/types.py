"""Domain value objects for voting.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

import re
from enum import Enum
from typing import Any

from pydantic import field_validator

from votekit.domain.error import InvalidVoteType
from votekit.domain.value.common import RootValueObject


class VoteItem(str, Enum):
    """Direction of a vote.

    Only two mutually exclusive directions exist. The member values are the
    canonical tokens stored in the ``vote_type`` column.
    """

    UP = "up_vote"
    DOWN = "down_vote"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Any) -> "VoteItem":
        """Parse a canonical token into a VoteItem.

        Matching is exact and case-sensitive.

        Args:
            raw: Token to parse (or an existing VoteItem)

        Returns:
            The matching VoteItem

        Raises:
            InvalidVoteType: If raw is not one of the canonical tokens
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise InvalidVoteType(raw)
        try:
            return cls(raw)
        except ValueError:
            raise InvalidVoteType(raw) from None


class VotableType(RootValueObject[str]):
    """Type tag of a votable entity.

    A stable short string that identifies the entity kind in the polymorphic
    (votable_type, votable_id) reference, e.g. 'posts' or 'books'.
    """

    @field_validator("root")
    @classmethod
    def validate_type_tag(cls, v: str) -> str:
        """Validate type tag format."""
        if not re.match(r"^[a-z0-9_.-]{1,64}$", v):
            raise ValueError(
                "Votable type must be 1-64 characters of lowercase letters, "
                "digits, '_', '-' or '.'"
            )
        return v
