"""Apply merge plans to the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from convmerge.domain.model import DeleteMode

if TYPE_CHECKING:
    from uuid import UUID

    from convmerge.domain.ports.unit_of_work import MergeUnitOfWork

    from .plan import MergePlan

log = logging.getLogger(__name__)


class SimulatedPlanError(RuntimeError):
    """Raised when a plan computed in simulation mode is handed to the executor."""


class MissingSurvivorError(LookupError):
    """Raised when the survivor of a plan no longer exists in the store."""


@dataclass(frozen=True, slots=True, kw_only=True)
class ExecutionResult:
    survivor_id: UUID
    merged_ids: tuple[UUID, ...]
    skipped_ids: tuple[UUID, ...]
    messages_moved: int


class MergeInterruptedError(RuntimeError):
    """Raised when a duplicate fails after earlier duplicates were committed.

    ``result`` holds what was already merged; ``failed_id`` is the duplicate
    whose merge was rolled back.
    """

    def __init__(self, result: ExecutionResult, failed_id: UUID, cause: Exception) -> None:
        super().__init__(
            f"Merge into {result.survivor_id} stopped at {failed_id} "
            f"after {len(result.merged_ids)} merged: {cause}"
        )
        self.result = result
        self.failed_id = failed_id


def execute_merge_plan(
    plan: MergePlan,
    uow: MergeUnitOfWork,
    *,
    delete_mode: DeleteMode = DeleteMode.SOFT,
    owner_user_id: UUID | None = None,
) -> ExecutionResult:
    """Fold every duplicate of ``plan`` into its survivor.

    ``uow`` must already be entered. Each duplicate is committed on its own:
    messages are reassigned first and the duplicate is removed second, so an
    interrupted run leaves at worst an empty duplicate that the next run merges.
    Duplicates that disappeared since planning are skipped. A store failure
    part way through raises ``MergeInterruptedError`` carrying the committed
    progress.
    """

    if plan.simulated:
        raise SimulatedPlanError(f"Refusing to execute simulated plan for key {plan.key}")

    conversations = uow.repositories.conversations
    messages = uow.repositories.messages

    survivor = conversations.get(plan.survivor_id)
    if survivor is None:
        raise MissingSurvivorError(f"Survivor conversation {plan.survivor_id} not found")

    merged: list[UUID] = []
    skipped: list[UUID] = []
    moved_total = 0

    def progress() -> ExecutionResult:
        return ExecutionResult(
            survivor_id=plan.survivor_id,
            merged_ids=tuple(merged),
            skipped_ids=tuple(skipped),
            messages_moved=moved_total,
        )

    for entry in plan.duplicates:
        try:
            duplicate = conversations.get(entry.conversation_id)
            if duplicate is None:
                log.warning(
                    "Duplicate conversation %s vanished before merge; skipping",
                    entry.conversation_id,
                )
                skipped.append(entry.conversation_id)
                continue

            moved = messages.reassign(duplicate.id, survivor.id)
            survivor.touch(duplicate.last_message_at)
            if owner_user_id is not None:
                survivor.assigned_user_id = owner_user_id
            conversations.remove(duplicate, mode=delete_mode)
            uow.commit()
        except Exception as exc:
            uow.rollback()
            raise MergeInterruptedError(progress(), entry.conversation_id, exc) from exc

        log.debug(
            "Merged conversation %s into %s (%s messages moved)",
            duplicate.id,
            survivor.id,
            moved,
        )
        merged.append(duplicate.id)
        moved_total += moved

    return progress()
