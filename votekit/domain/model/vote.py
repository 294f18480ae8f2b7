"""Vote entity.

A vote links one voter to one votable with a direction (up or down).
Each voter holds at most one vote per votable; switching direction replaces
the row instead of updating it.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from votekit.domain.model.common import DomainModel
from votekit.domain.value import VotableId, VotableType, VoteId, VoteItem, VoterId


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per voter per votable (protocol plus unique constraint)
    - Never updated in place: a switch deletes and recreates the row
    - Polymorphic reference to the votable via (votable_type, votable_id)
    """

    id: VoteId
    voter_id: VoterId
    votable_type: VotableType
    votable_id: VotableId
    vote_type: VoteItem
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("vote_type", mode="before")
    @classmethod
    def parse_vote_type(cls, v: Any) -> VoteItem:
        """Accept only the canonical vote tokens."""
        return VoteItem.parse(v)

    @property
    def is_up(self) -> bool:
        return self.vote_type is VoteItem.UP

    @property
    def is_down(self) -> bool:
        return self.vote_type is VoteItem.DOWN

    @property
    def votable_key(self) -> tuple[VotableType, VotableId]:
        """Polymorphic key of the voted entity."""
        return (self.votable_type, self.votable_id)
