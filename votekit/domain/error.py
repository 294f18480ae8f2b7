"""Domain layer errors."""

from typing import Any


class DomainError(Exception):
    """Base domain error."""

    pass


class InvalidVoteType(DomainError, ValueError):
    """Raised when a vote direction is not one of the canonical tokens."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unexpected vote type: {value}")


class UnknownVotableTypeError(DomainError):
    """Raised when no entity model is registered for a votable type."""

    def __init__(self, votable_type: Any):
        self.votable_type = votable_type
        super().__init__(f"No votable model registered for type: {votable_type}")


class RelationNotLoadedError(DomainError):
    """Raised when reading a relation that has not been materialized."""

    def __init__(self, relation: str):
        self.relation = relation
        super().__init__(f"Relation not loaded: {relation}")
