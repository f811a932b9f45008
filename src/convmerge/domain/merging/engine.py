"""Orchestrator for duplicate conversation merging.

Per session: group conversations by normalized phone, rank each group, build a
plan and, unless simulating, execute it. Every session runs in its own unit of
work so a store failure in one session leaves the others untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from convmerge.domain.model import DeleteMode

from .execute import MergeInterruptedError, execute_merge_plan
from .group import group_conversations
from .normalize import PhoneNormalizer
from .plan import build_merge_plan
from .report import LoggingMergeListener, MergeReport, SessionReport
from .selection import select_survivor

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from convmerge.domain.model import Conversation, Session
    from convmerge.domain.ports.reporting import MergeListener
    from convmerge.domain.ports.unit_of_work import MergeRepositories, MergeUnitOfWork

    from .execute import ExecutionResult
    from .plan import MergePlan

log = logging.getLogger(__name__)


class NoMatchingSessionsError(LookupError):
    """Raised when the session selector matches no live session."""

    def __init__(self, session_id: UUID | None) -> None:
        self.session_id = session_id
        if session_id is None:
            super().__init__("No sessions found")
        else:
            super().__init__(f"No sessions found for id {session_id}")


class ConversationNotFoundError(LookupError):
    """Raised when no live conversation has the requested remote jid."""

    def __init__(self, remote_jid: str) -> None:
        self.remote_jid = remote_jid
        super().__init__(f"No conversation found for {remote_jid}")


class PairMergeError(ValueError):
    """Raised when two conversations cannot be merged into each other."""


@dataclass(slots=True, kw_only=True)
class ConversationMergeEngine:
    """Run duplicate detection and merging across sessions."""

    unit_of_work_factory: Callable[[], MergeUnitOfWork]
    normalizer: PhoneNormalizer = field(default_factory=PhoneNormalizer)
    delete_mode: DeleteMode = DeleteMode.SOFT
    listener: MergeListener = field(default_factory=LoggingMergeListener)

    def run(self, *, session_id: UUID | None = None, simulate: bool = False) -> MergeReport:
        with self.unit_of_work_factory() as uow:
            sessions = list(uow.repositories.sessions.list_active(session_id=session_id))
        if not sessions:
            raise NoMatchingSessionsError(session_id)

        self.listener.run_started(simulate=simulate)
        report = MergeReport(simulated=simulate)
        for session in sessions:
            report = report.with_session(self.process_session(session, simulate=simulate))
        self.listener.run_finished(report)
        return report

    def process_session(self, session: Session, *, simulate: bool = False) -> SessionReport:
        self.listener.session_started(session)
        plans: list[MergePlan] = []
        results: list[ExecutionResult] = []
        try:
            with self.unit_of_work_factory() as uow:
                repositories = uow.repositories
                conversations = repositories.conversations.list_for_session(session.id)
                groups = group_conversations(conversations, normalizer=self.normalizer)
                for key, members in groups.items():
                    counts = repositories.messages.count_by_conversation(
                        member.id for member in members
                    )
                    survivor = select_survivor(members, counts)
                    plan = build_merge_plan(
                        members,
                        survivor,
                        key=key,
                        message_counts=counts,
                        simulated=simulate,
                    )
                    self._apply(plan, uow, session, plans, results)
        except Exception as exc:
            return self._session_failed(session, plans, results, exc, simulate=simulate)
        return self._session_finished(session, plans, results, simulate=simulate)

    def merge_pair(
        self,
        *,
        source_jid: str,
        target_jid: str,
        session_id: UUID | None = None,
        simulate: bool = False,
    ) -> MergeReport:
        """Merge the conversation at ``source_jid`` into the one at ``target_jid``.

        The survivor is the caller's choice, not the scorer's. Both must be live,
        distinct, non-group conversations of one session.
        """

        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            source = _resolve_conversation(repositories, source_jid, session_id)
            target = _resolve_conversation(repositories, target_jid, session_id)
            if source.id == target.id:
                raise PairMergeError(f"{source_jid} and {target_jid} are the same conversation")
            if source.is_group or target.is_group:
                raise PairMergeError("Group threads are never merged")
            if source.session_id != target.session_id:
                raise PairMergeError(f"{source_jid} and {target_jid} belong to different sessions")
            sessions = list(repositories.sessions.list_active(session_id=target.session_id))
        if not sessions:
            raise NoMatchingSessionsError(target.session_id)
        session = sessions[0]

        self.listener.run_started(simulate=simulate)
        self.listener.session_started(session)
        plans: list[MergePlan] = []
        results: list[ExecutionResult] = []
        try:
            with self.unit_of_work_factory() as uow:
                counts = uow.repositories.messages.count_by_conversation((target.id, source.id))
                plan = build_merge_plan(
                    (target, source),
                    target,
                    key=self.normalizer.normalize(target.contact_phone) or target.remote_jid,
                    message_counts=counts,
                    simulated=simulate,
                )
                self._apply(plan, uow, session, plans, results)
        except Exception as exc:
            session_report = self._session_failed(session, plans, results, exc, simulate=simulate)
        else:
            session_report = self._session_finished(session, plans, results, simulate=simulate)

        report = MergeReport(simulated=simulate).with_session(session_report)
        self.listener.run_finished(report)
        return report

    def _apply(
        self,
        plan: MergePlan,
        uow: MergeUnitOfWork,
        session: Session,
        plans: list[MergePlan],
        results: list[ExecutionResult],
    ) -> None:
        self.listener.group_planned(plan)
        plans.append(plan)
        if plan.simulated:
            return
        try:
            result = execute_merge_plan(
                plan,
                uow,
                delete_mode=self.delete_mode,
                owner_user_id=session.owner_user_id,
            )
        except MergeInterruptedError as exc:
            results.append(exc.result)
            raise
        results.append(result)

    def _session_finished(
        self,
        session: Session,
        plans: list[MergePlan],
        results: list[ExecutionResult],
        *,
        simulate: bool,
    ) -> SessionReport:
        finished = SessionReport(
            session_id=session.id,
            phone_number=session.phone_number,
            plans=tuple(plans),
            results=tuple(results),
            simulated=simulate,
        )
        self.listener.session_finished(finished)
        return finished

    def _session_failed(
        self,
        session: Session,
        plans: list[MergePlan],
        results: list[ExecutionResult],
        exc: Exception,
        *,
        simulate: bool,
    ) -> SessionReport:
        log.exception("Failed to merge conversations for session %s", session.id)
        failed = SessionReport(
            session_id=session.id,
            phone_number=session.phone_number,
            plans=tuple(plans),
            results=tuple(results),
            simulated=simulate,
            error=str(exc) or type(exc).__name__,
        )
        self.listener.session_failed(failed)
        return failed


def _resolve_conversation(
    repositories: MergeRepositories,
    remote_jid: str,
    session_id: UUID | None,
) -> Conversation:
    matches = repositories.conversations.find_by_remote_jid(remote_jid, session_id=session_id)
    if not matches:
        raise ConversationNotFoundError(remote_jid)
    if len(matches) > 1:
        raise PairMergeError(
            f"{remote_jid} exists in {len(matches)} sessions; pass a session id to choose one"
        )
    return matches[0]
