"""Base service class for domain services."""

from typing import Optional, Union

from votekit.domain.model.capability import Votable, Voter
from votekit.domain.value import VotableType, VoteItem

VoteTypeLike = Union[VoteItem, str]
VotableTypeLike = Union[VotableType, str, type[Votable]]


class Service:
    """Base class for all domain services.

    Domain services contain business logic that doesn't naturally belong
    to a single entity or spans multiple entities/aggregates.
    """

    pass


def parse_vote_type(vote_type: Optional[VoteTypeLike]) -> Optional[VoteItem]:
    """Parse an optional direction filter."""
    return None if vote_type is None else VoteItem.parse(vote_type)


def resolve_votable_type(votable_type: VotableTypeLike) -> VotableType:
    """Accept a type tag, its string form, or a Votable subclass."""
    if isinstance(votable_type, VotableType):
        return votable_type
    if isinstance(votable_type, type) and issubclass(votable_type, Votable):
        return votable_type.votable_type
    return VotableType(votable_type)


def loaded_vote_type(
    voter: Voter, votable: Votable
) -> tuple[bool, Optional[VoteItem]]:
    """Look up a voter's vote on a votable in already-loaded relations.

    Returns:
        (resolved, vote_type): ``resolved`` is False when neither the voter's
        votes nor the votable's voters are loaded. Otherwise ``vote_type`` is
        the direction of the vote, or None when there is no vote.
    """
    if voter.votes.is_loaded:
        key = votable.votable_key
        for vote in voter.votes:
            if vote.votable_key == key:
                return True, vote.vote_type
        return True, None

    if votable.voters.is_loaded:
        for pivot in votable.voters:
            if pivot.voter_id == voter.voter_id:
                return True, pivot.vote_type
        return True, None

    return False, None


def matches(found: Optional[VoteItem], wanted: Optional[VoteItem]) -> bool:
    """Whether a found vote satisfies an optional direction filter."""
    if found is None:
        return False
    return wanted is None or found is wanted
