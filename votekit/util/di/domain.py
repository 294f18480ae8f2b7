"""Domain layer DI providers."""

from dishka import Scope, provide

from votekit.config import VoteSettings
from votekit.domain.event import EventBus
from votekit.domain.repository import (
    VotableRepository,
    VoteRepository,
    VoterRepository,
)
from votekit.domain.service import VotableService, VoterService
from votekit.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session
    lifecycle. The event bus lives for the whole application so subscriptions
    survive across requests.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_event_bus(self) -> EventBus:
        """Provide the application-wide vote event bus."""
        return EventBus()

    @provide
    def get_voter_service(
        self,
        vote_repository: VoteRepository,
        voter_repository: VoterRepository,
        votable_repository: VotableRepository,
        event_bus: EventBus,
        vote_settings: VoteSettings,
    ) -> VoterService:
        """Provide voter domain service."""
        return VoterService(
            vote_repository=vote_repository,
            voter_repository=voter_repository,
            votable_repository=votable_repository,
            event_bus=event_bus,
            vote_model=vote_settings.vote_model,
        )

    @provide
    def get_votable_service(
        self,
        vote_repository: VoteRepository,
        voter_repository: VoterRepository,
        votable_repository: VotableRepository,
    ) -> VotableService:
        """Provide votable domain service."""
        return VotableService(
            vote_repository=vote_repository,
            voter_repository=voter_repository,
            votable_repository=votable_repository,
        )
