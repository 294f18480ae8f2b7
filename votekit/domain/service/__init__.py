"""Domain services."""

from .base import Service
from .votable_service import VotableService
from .voter_service import VoterService

__all__ = [
    "Service",
    "VotableService",
    "VoterService",
]
