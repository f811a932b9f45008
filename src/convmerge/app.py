"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from convmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMergeUnitOfWork,
    is_started,
    startup,
)
from convmerge.config import MergeConfig, get_merge_config
from convmerge.domain.merging import ConversationMergeEngine, LoggingMergeListener
from convmerge.domain.ports.unit_of_work import MergeUnitOfWork

if TYPE_CHECKING:
    from uuid import UUID

    from convmerge.domain.merging import MergeReport
    from convmerge.domain.ports.reporting import MergeListener

UnitOfWorkFactory = Callable[[], MergeUnitOfWork]


log = getLogger(__name__)


def _build_engine(
    config: MergeConfig,
    listener: MergeListener | None,
    unit_of_work_factory: UnitOfWorkFactory | None,
) -> ConversationMergeEngine:
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyMergeUnitOfWork
    return ConversationMergeEngine(
        unit_of_work_factory=unit_of_work_factory,
        normalizer=config.normalizer(),
        delete_mode=config.delete_mode,
        listener=listener or LoggingMergeListener(),
    )


def merge_duplicate_conversations(
    *,
    session_id: UUID | None = None,
    simulate: bool = False,
    config: MergeConfig | None = None,
    listener: MergeListener | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MergeReport:
    """Merge duplicate conversations using the configured adapters."""

    effective_config = config or get_merge_config()
    engine = _build_engine(effective_config, listener, unit_of_work_factory)

    log.info(
        "Starting merge: session=%s, simulate=%s, country_code=%s, delete_mode=%s",
        session_id or "all",
        simulate,
        effective_config.default_country_code,
        effective_config.delete_mode,
    )

    report = engine.run(session_id=session_id, simulate=simulate)

    log.info(
        f"Finished merge: groups={report.total_duplicate_groups}, "
        f"merged={report.total_conversations_merged}, "
        f"failed_sessions={len(report.failed_sessions)}"
    )
    return report


def merge_conversations(
    source_jid: str,
    target_jid: str,
    *,
    session_id: UUID | None = None,
    simulate: bool = False,
    config: MergeConfig | None = None,
    listener: MergeListener | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MergeReport:
    """Fold the conversation at ``source_jid`` into the one at ``target_jid``."""

    effective_config = config or get_merge_config()
    engine = _build_engine(effective_config, listener, unit_of_work_factory)

    log.info(
        "Starting pair merge: %s -> %s, session=%s, simulate=%s",
        source_jid,
        target_jid,
        session_id or "any",
        simulate,
    )
    report = engine.merge_pair(
        source_jid=source_jid,
        target_jid=target_jid,
        session_id=session_id,
        simulate=simulate,
    )
    log.info(
        f"Finished pair merge: merged={report.total_conversations_merged}, "
        f"messages_moved={report.total_messages_moved}"
    )
    return report
