"""Line-oriented console output for merge runs."""

# ruff: noqa: T201

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from convmerge.domain.merging import MergePlan, MergeReport, SessionReport
    from convmerge.domain.model import Session

RULE = "-" * 47


class ConsoleMergeListener:
    """Print merge progress the way operators read it in a terminal."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _emit(self, line: str = "") -> None:
        print(line, file=self.stream)

    def run_started(self, *, simulate: bool) -> None:
        if simulate:
            self._emit("DRY RUN MODE - No changes will be made")
            self._emit()

    def session_started(self, session: Session) -> None:
        self._emit(f"Processing session: {session.phone_number} ({session.id})")

    def group_planned(self, plan: MergePlan) -> None:
        self._emit(f"  {plan.contact_label} (+{plan.key}): {plan.group_size} conversations")
        self._emit(
            f"     -> Keeping: {plan.survivor_remote_jid} "
            f"({plan.survivor_message_count} messages)"
        )
        for entry in plan.duplicates:
            self._emit(f"     -> Merging: {entry.remote_jid} ({entry.message_count} messages)")
        self._emit()

    def session_finished(self, report: SessionReport) -> None:
        if not report.plans:
            self._emit("  No duplicates found")

    def session_failed(self, report: SessionReport) -> None:
        self._emit(f"  Error: {report.error}")

    def run_finished(self, report: MergeReport) -> None:
        self._emit()
        self._emit(RULE)
        self._emit(f"Total duplicates found: {report.total_duplicate_groups}")
        self._emit(f"Total conversations merged: {report.total_conversations_merged}")
        if report.failed_sessions:
            self._emit(f"Sessions failed: {len(report.failed_sessions)}")
        self._emit(RULE)
