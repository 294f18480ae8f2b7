"""Strongly typed identifiers for the voting domain.

All three are UUIDs; the votes table stores them in UUID columns.

Using NewType keeps voter, votable and vote identifiers from being mixed up
while still storing plain UUIDs.
"""

from typing import NewType
from uuid import UUID

VoteId = NewType("VoteId", UUID)
VoterId = NewType("VoterId", UUID)
VotableId = NewType("VotableId", UUID)
