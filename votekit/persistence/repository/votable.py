"""SQL implementation of Votable repository."""

from typing import List, Optional, Sequence

import logfire
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from votekit.domain.model import Votable
from votekit.domain.repository import VotableRepository
from votekit.domain.value import VotableId, VotableType, VoteItem, VoterId
from votekit.persistence.mappers import row_to_entity
from votekit.persistence.query import pop_vote_counts, with_vote_counts
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.tables import VoteSchema


class SqlVotableRepository(VotableRepository):
    """Reads votables from the host application's registered tables."""

    def __init__(
        self, session: AsyncSession, schema: VoteSchema, registry: ModelRegistry
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            schema: Votes table schema
            registry: Registry of votable models and tables
        """
        self.session = session
        self.schema = schema
        self.registry = registry

    async def find_by_ids(
        self, votable_type: VotableType, votable_ids: Sequence[VotableId]
    ) -> List[Votable]:
        """Find votables of one type by ID (batch query)."""
        mapped = self.registry.votable(votable_type)
        if not votable_ids:
            return []

        stmt = select(mapped.table).where(mapped.key.in_(votable_ids))
        result = await self.session.execute(stmt)
        return [row_to_entity(row._asdict(), mapped.model) for row in result.fetchall()]

    async def find_voted_by(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Votable]:
        """Find the items of one type a voter has voted on (single query)."""
        mapped = self.registry.votable(votable_type)
        votes = self.schema.votes

        voted_ids = select(votes.c.votable_id).where(
            self.schema.voter_column == voter_id,
            votes.c.votable_type == votable_type.root,
        )
        if vote_type is not None:
            voted_ids = voted_ids.where(votes.c.vote_type == vote_type.value)

        stmt = select(mapped.table).where(mapped.key.in_(voted_ids))
        result = await self.session.execute(stmt)
        return [row_to_entity(row._asdict(), mapped.model) for row in result.fetchall()]

    async def find_with_vote_counts(
        self,
        votable_type: VotableType,
        votable_ids: Optional[Sequence[VotableId]] = None,
    ) -> List[Votable]:
        """Find votables with total/up/down counts attached (single query)."""
        with logfire.span(
            "votable_repository.find_with_vote_counts",
            votable_type=str(votable_type),
        ):
            mapped = self.registry.votable(votable_type)

            stmt = with_vote_counts(
                select(mapped.table), self.schema, votable_type, mapped.key
            )
            if votable_ids is not None:
                if not votable_ids:
                    return []
                stmt = stmt.where(mapped.key.in_(votable_ids))

            result = await self.session.execute(stmt)

            votables: List[Votable] = []
            for row in result.fetchall():
                data = row._asdict()
                counts = pop_vote_counts(data)
                votable = row_to_entity(data, mapped.model)
                votable.attach_vote_counts(counts)
                votables.append(votable)

            logfire.debug("Votables counted", count=len(votables))
            return votables
