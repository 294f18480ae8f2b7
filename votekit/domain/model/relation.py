"""Relation caches and derived annotations carried by entity handles."""

from typing import Generic, Iterable, TypeVar

from pydantic import Field

from votekit.domain.error import RelationNotLoadedError
from votekit.domain.model.common import DomainModel

T = TypeVar("T")


class LoadedRelation(Generic[T]):
    """Explicitly materialized relation.

    A relation is either unloaded or holds the full item set read from
    storage. Point queries check ``is_loaded`` before going to storage.
    """

    __slots__ = ("name", "_items")

    def __init__(self, name: str) -> None:
        self.name = name
        self._items: tuple[T, ...] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._items is not None

    @property
    def items(self) -> tuple[T, ...]:
        """Materialized items.

        Raises:
            RelationNotLoadedError: If the relation has not been loaded
        """
        if self._items is None:
            raise RelationNotLoadedError(self.name)
        return self._items

    def set(self, items: Iterable[T]) -> None:
        self._items = tuple(items)

    def unset(self) -> None:
        self._items = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __repr__(self) -> str:
        state = f"{len(self._items)} items" if self._items is not None else "unloaded"
        return f"LoadedRelation({self.name!r}, {state})"


class VoteStatus(DomainModel):
    """A voter's vote state on one votable, attached in batch."""

    has_voted: bool = False
    has_up_voted: bool = False
    has_down_voted: bool = False


class VoteCounts(DomainModel):
    """Aggregate vote counts of one votable, attached in batch."""

    total_votes: int = Field(default=0, ge=0)
    total_up_votes: int = Field(default=0, ge=0)
    total_down_votes: int = Field(default=0, ge=0)
