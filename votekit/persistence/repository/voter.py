"""SQL implementation of Voter repository."""

from typing import List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from votekit.domain.model import Voter, VoterPivot
from votekit.domain.repository import VoterRepository
from votekit.domain.value import VotableId, VotableType, VoteItem, VoterId
from votekit.persistence.mappers import row_to_entity
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.tables import VoteSchema


class SqlVoterRepository(VoterRepository):
    """Reads voters from the host application's registered voter table."""

    def __init__(
        self, session: AsyncSession, schema: VoteSchema, registry: ModelRegistry
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            schema: Votes table schema
            registry: Registry holding the voter model and table
        """
        self.session = session
        self.schema = schema
        self.registry = registry

    async def find_by_ids(self, voter_ids: Sequence[VoterId]) -> List[Voter]:
        """Find voters by ID (batch query)."""
        if not voter_ids:
            return []

        mapped = self.registry.voter
        stmt = select(mapped.table).where(mapped.key.in_(voter_ids))
        result = await self.session.execute(stmt)
        return [row_to_entity(row._asdict(), mapped.model) for row in result.fetchall()]

    async def find_voters_of(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, List[VoterPivot]]:
        """Find the voters of many items of one type (batch query)."""
        voters: dict[VotableId, List[VoterPivot]] = {
            votable_id: [] for votable_id in votable_ids
        }
        if not votable_ids:
            return voters

        mapped = self.registry.voter
        votes = self.schema.votes
        stmt = (
            select(
                mapped.table,
                votes.c.votable_id.label("pivot_votable_id"),
                votes.c.vote_type.label("pivot_vote_type"),
                votes.c.created_at.label("pivot_voted_at"),
            )
            .select_from(
                mapped.table.join(votes, self.schema.voter_column == mapped.key)
            )
            .where(
                votes.c.votable_type == votable_type.root,
                votes.c.votable_id.in_(votable_ids),
            )
            .order_by(votes.c.created_at)
        )
        result = await self.session.execute(stmt)

        for row in result.fetchall():
            data = row._asdict()
            votable_id = VotableId(UUID(str(data.pop("pivot_votable_id"))))
            vote_type = VoteItem.parse(data.pop("pivot_vote_type"))
            voted_at = data.pop("pivot_voted_at")
            voters.setdefault(votable_id, []).append(
                VoterPivot(
                    voter=row_to_entity(data, mapped.model),
                    vote_type=vote_type,
                    voted_at=voted_at,
                )
            )

        return voters
