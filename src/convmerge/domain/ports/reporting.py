"""Port for operator-facing merge progress."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from convmerge.domain.merging.plan import MergePlan
    from convmerge.domain.merging.report import MergeReport, SessionReport
    from convmerge.domain.model import Session


@runtime_checkable
class MergeListener(Protocol):
    """Receives progress events while the merge engine runs."""

    def run_started(self, *, simulate: bool) -> None: ...

    def session_started(self, session: Session) -> None: ...

    def group_planned(self, plan: MergePlan) -> None: ...

    def session_finished(self, report: SessionReport) -> None: ...

    def session_failed(self, report: SessionReport) -> None: ...

    def run_finished(self, report: MergeReport) -> None: ...
