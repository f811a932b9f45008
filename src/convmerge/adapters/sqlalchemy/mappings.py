"""SQLAlchemy mapping metadata for the messaging domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from convmerge.domain.model import Conversation, Message, MessageDirection, Session

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

session_table = Table(
    "whatsapp_sessions",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("phone_number", String, nullable=False),
    Column("session_name", String, nullable=True),
    Column("owner_user_id", UUIDColumnType, nullable=True),
    Column("deleted_at", UTCDateTime(), nullable=True),
)

conversation_table = Table(
    "whatsapp_conversations",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "session_id",
        UUIDColumnType,
        ForeignKey("whatsapp_sessions.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("remote_jid", String, nullable=False),
    Column("contact_phone", String, nullable=True),
    Column("contact_name", String, nullable=True),
    Column("is_group", Boolean, nullable=False, default=False),
    Column("last_message_at", UTCDateTime(), nullable=True),
    Column("assigned_user_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=True),
    UniqueConstraint("session_id", "remote_jid"),
    Index("ix_whatsapp_conversations_session_group", "session_id", "is_group"),
)

message_table = Table(
    "whatsapp_messages",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "conversation_id",
        UUIDColumnType,
        ForeignKey("whatsapp_conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("direction", Enum(MessageDirection, native_enum=False), nullable=False),
    Column("sent_at", UTCDateTime(), nullable=False),
    Column("content", Text, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Session, session_table)
    mapper_registry.map_imperatively(Conversation, conversation_table)
    mapper_registry.map_imperatively(Message, message_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
