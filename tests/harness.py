"""Test harness for unit and integration tests.

Unit tests run against in-memory repositories. Integration tests that unmock
persistence read the database URL from the environment (DATABASE__URL) and
need the host tables registered through ``context``.
"""

from typing import Any

from dishka import AsyncContainer
import pytest_asyncio
from sqlalchemy import event, insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from votekit.persistence.database import create_tables
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.tables import VoteSchema
from votekit.util.di import Component
from tests.di import build_test_container
from tests.entities import (
    Book,
    Post,
    User,
    books_table,
    host_metadata,
    posts_table,
    users_table,
)


def create_env_fixture(
    unmock: set[Component] | None = None, context: dict[Any, Any] | None = None
):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Settings loaded from environment automatically

    Args:
        unmock: Components to use real implementations for
        context: Container context (e.g. {ModelRegistry: registry})

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        @pytest.mark.asyncio
        async def test_up_vote(unit_env):
            voter_service = await unit_env.get(VoterService)
            vote = await voter_service.up_vote(user, post)
            assert vote.is_up
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        # Build container with specified unmocking
        container = build_test_container(unmock=unmock or set(), context=context)

        # Open request-scoped context
        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


def build_registry() -> ModelRegistry:
    """Registry of the test host tables."""
    registry = ModelRegistry()
    registry.register_voter(User, users_table)
    registry.register_votable(Post, posts_table)
    registry.register_votable(Book, books_table)
    return registry


class QueryCounter:
    """Counts statements executed on an engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.count = 0
        event.listen(engine.sync_engine, "before_cursor_execute", self._on_execute)

    def _on_execute(self, conn, cursor, statement, parameters, context, executemany):
        self.count += 1

    def reset(self) -> None:
        self.count = 0


async def prepare_database(container: AsyncContainer, *entities) -> QueryCounter:
    """Create the votes and host tables, insert host rows, start counting."""
    engine = await container.get(AsyncEngine)
    schema = await container.get(VoteSchema)
    await create_tables(engine, schema.metadata)
    await create_tables(engine, host_metadata)

    tables = {User: users_table, Post: posts_table, Book: books_table}
    session = await container.get(AsyncSession)
    for entity in entities:
        await session.execute(insert(tables[type(entity)]).values(**entity.model_dump()))
    await session.commit()

    return QueryCounter(engine)
