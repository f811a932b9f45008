"""SQLAlchemy adapter package."""

from __future__ import annotations

from .mappings import (
    conversation_table,
    create_all_tables,
    mapper_registry,
    message_table,
    session_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyConversationRepository,
    SqlAlchemyMessageRepository,
    SqlAlchemySessionRepository,
)
from .unit_of_work import (
    SqlAlchemyMergeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyConversationRepository",
    "SqlAlchemyMergeUnitOfWork",
    "SqlAlchemyMessageRepository",
    "SqlAlchemySessionRepository",
    "StartupError",
    "configured_engine",
    "conversation_table",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "message_table",
    "session_table",
    "shutdown",
    "start_mappers",
]
