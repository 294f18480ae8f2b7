"""Registry of the host application's voter and votable tables.

The host application registers, at startup, which entity model and table
back the voters and each votable type. Repositories only look entries up.
"""

from typing import Generic, TypeVar

from sqlalchemy import Column, Table

from votekit.domain.error import UnknownVotableTypeError
from votekit.domain.model.capability import Votable, Voter
from votekit.domain.value import VotableType
from votekit.util.error import ConfigurationError

M = TypeVar("M")


class MappedModel(Generic[M]):
    """An entity model and the table its rows come from."""

    __slots__ = ("model", "table", "key")

    def __init__(self, model: type[M], table: Table) -> None:
        keys = list(table.primary_key.columns)
        if len(keys) != 1:
            raise ConfigurationError(
                f"Table {table.name} must have a single-column primary key"
            )
        self.model = model
        self.table = table
        self.key: Column = keys[0]


class ModelRegistry:
    """Maps voter and votable entity models to their tables."""

    def __init__(self) -> None:
        self._voter: MappedModel[Voter] | None = None
        self._votables: dict[VotableType, MappedModel[Votable]] = {}

    def register_voter(self, model: type[Voter], table: Table) -> None:
        self._voter = MappedModel(model, table)

    def register_votable(self, model: type[Votable], table: Table) -> None:
        self._votables[model.votable_type] = MappedModel(model, table)

    @property
    def voter(self) -> MappedModel[Voter]:
        if self._voter is None:
            raise ConfigurationError("No voter model registered")
        return self._voter

    def votable(self, votable_type: VotableType) -> MappedModel[Votable]:
        try:
            return self._votables[votable_type]
        except KeyError:
            raise UnknownVotableTypeError(votable_type) from None

    @property
    def votable_types(self) -> list[VotableType]:
        return list(self._votables)
