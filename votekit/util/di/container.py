"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container

from votekit.persistence.registry import ModelRegistry
from votekit.util.di import PROVIDERS, get_provider


def create_container(registry: ModelRegistry) -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables automatically.

    Args:
        registry: The host application's voter and votable tables

    Returns:
        Configured DI container with production providers
    """
    # Get provider instances - all are instantiated without arguments
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(
        *provider_instances, context={ModelRegistry: registry}
    )
