"""Messaging records: sessions, conversations and their messages.

These are plain dataclasses. The SQLAlchemy adapter maps them imperatively, so nothing
here knows about tables or sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from convmerge.domain.model.base import Entity
from convmerge.domain.model.enums import MessageDirection

if TYPE_CHECKING:
    from uuid import UUID

UNNAMED_CONTACT: Final[str] = "Unnamed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Session(Entity):
    """One messaging account (a physical phone number)."""

    phone_number: str
    session_name: str | None = None
    owner_user_id: UUID | None = None
    deleted_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class Conversation(Entity):
    """A thread with one remote contact or group under a session."""

    session_id: UUID
    remote_jid: str
    contact_phone: str | None = None
    contact_name: str | None = None
    is_group: bool = False
    last_message_at: datetime | None = None
    assigned_user_id: UUID | None = None
    created_at: datetime = field(default_factory=_utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def label(self) -> str:
        return self.contact_name or UNNAMED_CONTACT

    def soft_delete(self, at: datetime | None = None) -> None:
        self.deleted_at = at or _utcnow()

    def touch(self, at: datetime | None) -> None:
        """Advance ``last_message_at`` to ``at`` if it is later."""
        if at is None:
            return
        if self.last_message_at is None or at > self.last_message_at:
            self.last_message_at = at


@dataclass(eq=False, kw_only=True)
class Message(Entity):
    """A single message. Only its owning conversation matters to merging."""

    conversation_id: UUID
    direction: MessageDirection = MessageDirection.INCOMING
    sent_at: datetime = field(default_factory=_utcnow)
    content: str | None = None
