"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ConversationRepository,
    MessageRepository,
    Repository,
    SessionRepository,
)
from .reporting import MergeListener
from .unit_of_work import (
    MergeRepositories,
    MergeUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ConversationRepository",
    "MergeListener",
    "MergeRepositories",
    "MergeUnitOfWork",
    "MessageRepository",
    "Repository",
    "RepositoryCollection",
    "SessionRepository",
    "UnitOfWork",
]
