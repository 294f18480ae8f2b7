"""Application startup for hosts embedding votekit."""

from dishka import AsyncContainer
from sqlalchemy.ext.asyncio import AsyncEngine

from votekit.config import Settings
from votekit.persistence.database import create_tables
from votekit.persistence.registry import ModelRegistry
from votekit.persistence.tables import VoteSchema
from votekit.util.di.container import create_container
from votekit.util.logging import get_logger, setup_logging
from votekit.util.observability import configure_logfire

logger = get_logger(__name__)


async def bootstrap(
    registry: ModelRegistry, create_schema: bool = False
) -> AsyncContainer:
    """Build the production container and configure logging.

    Logfire is configured before the engine is created, so SQLAlchemy
    instrumentation picks it up.

    Args:
        registry: The host application's voter and votable tables
        create_schema: Create the votes table if it does not exist

    Returns:
        Configured DI container; open a request scope per unit of work
    """
    container = create_container(registry)

    settings = await container.get(Settings)
    setup_logging(settings)
    configure_logfire(settings)

    if create_schema:
        engine = await container.get(AsyncEngine)
        schema = await container.get(VoteSchema)
        await create_tables(engine, schema.metadata)
        logger.info("Votes table ready: %s", schema.votes.name)

    logger.info(
        "votekit started with %d votable type(s)", len(registry.votable_types)
    )
    return container
