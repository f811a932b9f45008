"""Ports for reading and mutating the messaging store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from convmerge.domain.model import Conversation, DeleteMode, Message, Session

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class SessionRepository(Repository[Session], Protocol):
    """Persistence contract for messaging sessions."""

    def list_active(self, *, session_id: UUID | None = None) -> Sequence[Session]:
        """Return live sessions, optionally restricted to one id."""
        ...


@runtime_checkable
class ConversationRepository(Repository[Conversation], Protocol):
    """Persistence contract for conversations.

    Soft-deleted conversations must be invisible to every read;
    merging relies on this to stay idempotent.
    """

    def get(self, conversation_id: UUID) -> Conversation | None: ...

    def find_by_remote_jid(
        self,
        remote_jid: str,
        *,
        session_id: UUID | None = None,
    ) -> Sequence[Conversation]:
        """Return live conversations addressed by ``remote_jid``, group threads included."""
        ...

    def list_for_session(self, session_id: UUID) -> Sequence[Conversation]:
        """Return the session's non-group conversations in insertion order."""
        ...

    def remove(self, conversation: Conversation, *, mode: DeleteMode) -> None: ...


@runtime_checkable
class MessageRepository(Repository[Message], Protocol):
    """Persistence contract for messages."""

    def count_by_conversation(self, conversation_ids: Iterable[UUID]) -> dict[UUID, int]:
        """Return message counts per conversation id (zero when it has none)."""
        ...

    def reassign(self, source_id: UUID, target_id: UUID) -> int:
        """Move every message of ``source_id`` to ``target_id``; return rows moved."""
        ...
