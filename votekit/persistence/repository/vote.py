"""SQL implementation of Vote repository."""

from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

import logfire
from sqlalchemy import and_, case, delete, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from votekit.domain.model import Vote, VoteCounts
from votekit.domain.repository import VotableKey, VoteRepository
from votekit.domain.value import VotableId, VotableType, VoteId, VoteItem, VoterId
from votekit.persistence.mappers import row_to_vote, vote_to_dict
from votekit.persistence.tables import VoteSchema


class SqlVoteRepository(VoteRepository):
    """SQLAlchemy Core implementation of VoteRepository."""

    def __init__(
        self, session: AsyncSession, schema: VoteSchema, vote_model: type[Vote] = Vote
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            schema: Votes table schema built from settings
            vote_model: Entity class for loaded votes
        """
        self.session = session
        self.schema = schema
        self.vote_model = vote_model

    @property
    def _votes(self):
        return self.schema.votes

    def _to_vote(self, row) -> Vote:
        return row_to_vote(row._asdict(), self.schema.voter_foreign_key, self.vote_model)

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Commit the enclosed writes together, or roll them all back."""
        try:
            yield
            await self.session.commit()
        except Exception as e:
            logfire.warn("Vote transaction rollback", error=str(e))
            await self.session.rollback()
            raise

    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID."""
        stmt = select(self._votes).where(self._votes.c.id == vote_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return self._to_vote(row) if row else None

    async def find_by_voter_and_votable(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
    ) -> Optional[Vote]:
        """Find a voter's vote on a specific item."""
        stmt = select(self._votes).where(
            and_(
                self.schema.voter_column == voter_id,
                self._votes.c.votable_type == votable_type.root,
                self._votes.c.votable_id == votable_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return self._to_vote(row) if row else None

    async def exists(
        self,
        voter_id: VoterId,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> bool:
        """Check whether a voter has voted on an item."""
        stmt = select(self._votes.c.id).where(
            self.schema.voter_column == voter_id,
            self._votes.c.votable_type == votable_type.root,
            self._votes.c.votable_id == votable_id,
        )
        if vote_type is not None:
            stmt = stmt.where(self._votes.c.vote_type == vote_type.value)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def find_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find votes cast by a voter, oldest first."""
        stmt = select(self._votes).where(self.schema.voter_column == voter_id)
        if votable_type is not None:
            stmt = stmt.where(self._votes.c.votable_type == votable_type.root)
        if vote_type is not None:
            stmt = stmt.where(self._votes.c.vote_type == vote_type.value)
        stmt = stmt.order_by(self._votes.c.created_at)
        result = await self.session.execute(stmt)
        return [self._to_vote(row) for row in result.fetchall()]

    async def find_by_voter_and_votables(
        self,
        voter_id: VoterId,
        votable_keys: Sequence[VotableKey],
    ) -> List[Vote]:
        """Find a voter's votes on multiple items (batch query)."""
        if not votable_keys:
            return []

        ids_by_type: dict[VotableType, list[VotableId]] = defaultdict(list)
        for votable_type, votable_id in votable_keys:
            ids_by_type[votable_type].append(votable_id)

        stmt = select(self._votes).where(
            self.schema.voter_column == voter_id,
            or_(
                *(
                    and_(
                        self._votes.c.votable_type == votable_type.root,
                        self._votes.c.votable_id.in_(votable_ids),
                    )
                    for votable_type, votable_ids in ids_by_type.items()
                )
            ),
        )
        result = await self.session.execute(stmt)
        return [self._to_vote(row) for row in result.fetchall()]

    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> List[Vote]:
        """Find all votes on a specific item, oldest first."""
        stmt = select(self._votes).where(
            self._votes.c.votable_type == votable_type.root,
            self._votes.c.votable_id == votable_id,
        )
        if vote_type is not None:
            stmt = stmt.where(self._votes.c.vote_type == vote_type.value)
        stmt = stmt.order_by(self._votes.c.created_at)
        result = await self.session.execute(stmt)
        return [self._to_vote(row) for row in result.fetchall()]

    async def save(self, vote: Vote) -> Vote:
        """Save a vote (create)."""
        vote_dict = vote_to_dict(vote, self.schema.voter_foreign_key)
        stmt = insert(self._votes).values(**vote_dict)
        await self.session.execute(stmt)
        await self.session.flush()
        return vote

    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote."""
        stmt = delete(self._votes).where(self._votes.c.id == vote_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: VotableId,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        """Count votes on a specific item."""
        stmt = (
            select(func.count())
            .select_from(self._votes)
            .where(
                self._votes.c.votable_type == votable_type.root,
                self._votes.c.votable_id == votable_id,
            )
        )
        if vote_type is not None:
            stmt = stmt.where(self._votes.c.vote_type == vote_type.value)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_by_voter(
        self,
        voter_id: VoterId,
        votable_type: Optional[VotableType] = None,
        vote_type: Optional[VoteItem] = None,
    ) -> int:
        """Count votes cast by a voter."""
        stmt = (
            select(func.count())
            .select_from(self._votes)
            .where(self.schema.voter_column == voter_id)
        )
        if votable_type is not None:
            stmt = stmt.where(self._votes.c.votable_type == votable_type.root)
        if vote_type is not None:
            stmt = stmt.where(self._votes.c.vote_type == vote_type.value)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_by_votables(
        self,
        votable_type: VotableType,
        votable_ids: Sequence[VotableId],
    ) -> dict[VotableId, VoteCounts]:
        """Count total/up/down votes for many items of one type (batch query)."""
        counts = {votable_id: VoteCounts() for votable_id in votable_ids}
        if not votable_ids:
            return counts

        def _sum(item: VoteItem):
            return func.sum(case((self._votes.c.vote_type == item.value, 1), else_=0))

        stmt = (
            select(
                self._votes.c.votable_id,
                func.count(self._votes.c.id).label("total_votes"),
                _sum(VoteItem.UP).label("total_up_votes"),
                _sum(VoteItem.DOWN).label("total_down_votes"),
            )
            .where(
                self._votes.c.votable_type == votable_type.root,
                self._votes.c.votable_id.in_(votable_ids),
            )
            .group_by(self._votes.c.votable_id)
        )
        result = await self.session.execute(stmt)
        for row in result.fetchall():
            counts[VotableId(row.votable_id)] = VoteCounts(
                total_votes=row.total_votes or 0,
                total_up_votes=row.total_up_votes or 0,
                total_down_votes=row.total_down_votes or 0,
            )
        return counts
