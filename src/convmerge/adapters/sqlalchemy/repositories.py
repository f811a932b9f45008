"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select, update

from convmerge.adapters.sqlalchemy.mappings import (
    conversation_table,
    message_table,
    session_table,
)
from convmerge.domain.model import Conversation, DeleteMode, Message, Session

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session as OrmSession


class SqlAlchemySessionRepository:
    def __init__(self, session: OrmSession) -> None:
        self.session = session

    def add(self, entity: Session) -> None:
        self.session.add(entity)

    def list_active(self, *, session_id: uuid.UUID | None = None) -> list[Session]:
        stmt = (
            select(Session)
            .where(session_table.c.deleted_at.is_(None))
            .order_by(session_table.c.phone_number, session_table.c.id)
        )
        if session_id is not None:
            stmt = stmt.where(session_table.c.id == session_id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyConversationRepository:
    def __init__(self, session: OrmSession) -> None:
        self.session = session

    def add(self, entity: Conversation) -> None:
        self.session.add(entity)

    def get(self, conversation_id: uuid.UUID) -> Conversation | None:
        stmt = (
            select(Conversation)
            .where(conversation_table.c.id == conversation_id)
            .where(conversation_table.c.deleted_at.is_(None))
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_remote_jid(
        self,
        remote_jid: str,
        *,
        session_id: uuid.UUID | None = None,
    ) -> list[Conversation]:
        stmt = (
            select(Conversation)
            .where(conversation_table.c.remote_jid == remote_jid)
            .where(conversation_table.c.deleted_at.is_(None))
            .order_by(conversation_table.c.created_at, conversation_table.c.id)
        )
        if session_id is not None:
            stmt = stmt.where(conversation_table.c.session_id == session_id)
        return list(self.session.execute(stmt).scalars())

    def list_for_session(self, session_id: uuid.UUID) -> list[Conversation]:
        stmt = (
            select(Conversation)
            .where(conversation_table.c.session_id == session_id)
            .where(conversation_table.c.is_group.is_(False))
            .where(conversation_table.c.deleted_at.is_(None))
            .order_by(conversation_table.c.created_at, conversation_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def remove(self, conversation: Conversation, *, mode: DeleteMode) -> None:
        if mode is DeleteMode.HARD:
            self.session.delete(conversation)
        else:
            conversation.soft_delete(datetime.now(UTC))
        self.session.flush()


class SqlAlchemyMessageRepository:
    def __init__(self, session: OrmSession) -> None:
        self.session = session

    def add(self, entity: Message) -> None:
        self.session.add(entity)

    def count_by_conversation(
        self,
        conversation_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, int]:
        ids = list(conversation_ids)
        counts: dict[uuid.UUID, int] = dict.fromkeys(ids, 0)
        if not ids:
            return counts
        conversation_id_column = message_table.c.conversation_id
        stmt = (
            select(conversation_id_column, func.count())
            .where(conversation_id_column.in_(ids))
            .group_by(conversation_id_column)
        )
        for conversation_id, count in self.session.execute(stmt).tuples():
            counts[conversation_id] = count
        return counts

    def reassign(self, source_id: uuid.UUID, target_id: uuid.UUID) -> int:
        stmt = (
            update(message_table)
            .where(message_table.c.conversation_id == source_id)
            .values(conversation_id=target_id)
        )
        result = cast("CursorResult[tuple[()]]", self.session.execute(stmt))
        return result.rowcount
