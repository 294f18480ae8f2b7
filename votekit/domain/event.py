"""Vote events and the in-process event bus.

Two events describe vote state transitions:

- ``Voted``: a vote row was created
- ``CancelVoted``: a vote row was deleted (cancel or switch)

Events are published only after the storage transaction that produced them
has committed. Subscribers (denormalized counters, audit logs, notifiers) live
outside this package.
"""

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar
from uuid import uuid4

import logfire
from pydantic import Field

from votekit.domain.model.capability import Votable, Voter
from votekit.domain.model.common import DomainModel
from votekit.domain.model.vote import Vote

T = TypeVar("T", bound="VoteEvent")
EventHandler = Callable[[T], Awaitable[None]]


class VoteEvent(DomainModel):
    """Base class for vote events.

    Carries the full vote plus the resolved voter and votable entities.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=datetime.now)
    vote: Vote
    voter: Voter
    votable: Votable


class Voted(VoteEvent):
    """A vote was cast."""


class CancelVoted(VoteEvent):
    """A vote was removed."""


class EventBus:
    """In-memory pub/sub bus for vote events.

    Handlers run concurrently. A failing handler is logged and never affects
    the publisher or the other handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[VoteEvent], list[EventHandler[Any]]] = defaultdict(
            list
        )

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logfire.debug("Subscribed vote event handler", event_type=event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logfire.debug(
                "Unsubscribed vote event handler", event_type=event_type.__name__
            )

    async def publish(self, event: VoteEvent) -> None:
        """Deliver an event to every handler subscribed to its type."""
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logfire.debug("No handlers for vote event", event_type=event_type.__name__)
            return

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logfire.exception(
                    "Vote event handler failed",
                    event_type=event_type.__name__,
                    vote_id=str(event.vote.id),
                    error=str(e),
                )

        await asyncio.gather(*(safe_call(handler) for handler in handlers))

    async def publish_all(self, events: list[VoteEvent]) -> None:
        """Publish events one after another, preserving order."""
        for event in events:
            await self.publish(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logfire.debug("Cleared vote event handlers")
