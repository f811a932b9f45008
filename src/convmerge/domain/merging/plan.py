"""Merge plans: the read-only description of one group's merge.

A plan is computed the same way whether or not the run is simulated, so a dry
run reports exactly what a live run would do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from convmerge.domain.model import Conversation


class SurvivorNotInGroupError(ValueError):
    """Raised when the chosen survivor is not a member of the group."""


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateEntry:
    """A conversation that will be merged into the survivor."""

    conversation_id: UUID
    remote_jid: str
    message_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class MergePlan:
    session_id: UUID
    key: str
    contact_label: str
    survivor_id: UUID
    survivor_remote_jid: str
    survivor_message_count: int
    duplicates: tuple[DuplicateEntry, ...]
    simulated: bool = False

    @property
    def group_size(self) -> int:
        return len(self.duplicates) + 1

    @property
    def duplicate_ids(self) -> tuple[UUID, ...]:
        return tuple(entry.conversation_id for entry in self.duplicates)

    @property
    def messages_to_move(self) -> int:
        return sum(entry.message_count for entry in self.duplicates)

    @property
    def total_messages(self) -> int:
        return self.survivor_message_count + self.messages_to_move


def build_merge_plan(
    group: Sequence[Conversation],
    survivor: Conversation,
    *,
    key: str,
    message_counts: Mapping[UUID, int],
    simulated: bool = False,
) -> MergePlan:
    """Describe how ``group`` collapses into ``survivor``.

    Duplicates keep the group's order. ``contact_label`` comes from the first
    member, as the operator sees the group in insertion order.
    """

    if all(member.id != survivor.id for member in group):
        raise SurvivorNotInGroupError(f"Conversation {survivor.id} is not part of the group")

    duplicates = tuple(
        DuplicateEntry(
            conversation_id=member.id,
            remote_jid=member.remote_jid,
            message_count=message_counts.get(member.id, 0),
        )
        for member in group
        if member.id != survivor.id
    )
    return MergePlan(
        session_id=survivor.session_id,
        key=key,
        contact_label=group[0].label,
        survivor_id=survivor.id,
        survivor_remote_jid=survivor.remote_jid,
        survivor_message_count=message_counts.get(survivor.id, 0),
        duplicates=duplicates,
        simulated=simulated,
    )
