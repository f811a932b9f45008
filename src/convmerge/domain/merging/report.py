"""Per-session and run-wide merge counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from convmerge.domain.model import Session

    from .execute import ExecutionResult
    from .plan import MergePlan

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionReport:
    """Outcome of one session.

    ``plans`` lists every duplicate group found; ``results`` lists what was
    actually committed, including the partial result of an interrupted plan.
    """

    session_id: UUID
    phone_number: str
    plans: tuple[MergePlan, ...] = ()
    results: tuple[ExecutionResult, ...] = ()
    simulated: bool = False
    error: str | None = None

    @property
    def duplicate_groups(self) -> int:
        return len(self.plans)

    @property
    def planned_merges(self) -> int:
        return sum(plan.group_size - 1 for plan in self.plans)

    @property
    def conversations_merged(self) -> int:
        if self.simulated:
            return self.planned_merges
        return sum(len(result.merged_ids) for result in self.results)

    @property
    def messages_moved(self) -> int:
        return sum(result.messages_moved for result in self.results)

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeReport:
    """Accumulated outcome of one engine run.

    Instances are immutable; ``with_session`` returns the next accumulator.
    """

    simulated: bool = False
    sessions: tuple[SessionReport, ...] = field(default=())

    def with_session(self, session_report: SessionReport) -> MergeReport:
        return replace(self, sessions=(*self.sessions, session_report))

    @property
    def total_duplicate_groups(self) -> int:
        return sum(report.duplicate_groups for report in self.sessions)

    @property
    def total_conversations_merged(self) -> int:
        return sum(report.conversations_merged for report in self.sessions)

    @property
    def total_messages_moved(self) -> int:
        return sum(report.messages_moved for report in self.sessions)

    @property
    def failed_sessions(self) -> tuple[SessionReport, ...]:
        return tuple(report for report in self.sessions if report.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed_sessions


class LoggingMergeListener:
    """Default listener that writes progress to the module logger."""

    def run_started(self, *, simulate: bool) -> None:
        log.info("Starting duplicate conversation merge (simulate=%s)", simulate)

    def session_started(self, session: Session) -> None:
        log.info("Processing session: %s (%s)", session.phone_number, session.id)

    def group_planned(self, plan: MergePlan) -> None:
        log.info(
            "%s (+%s): %s conversations, keeping %s",
            plan.contact_label,
            plan.key,
            plan.group_size,
            plan.survivor_remote_jid,
        )

    def session_finished(self, report: SessionReport) -> None:
        if not report.plans:
            log.info("No duplicates found")

    def session_failed(self, report: SessionReport) -> None:
        log.error("Session %s failed: %s", report.session_id, report.error)

    def run_finished(self, report: MergeReport) -> None:
        log.info(
            "Finished merge: duplicate_groups=%s, merged=%s, messages_moved=%s, failed=%s",
            report.total_duplicate_groups,
            report.total_conversations_merged,
            report.total_messages_moved,
            len(report.failed_sessions),
        )
