"""Duplicate conversation detection and merging.

Stages, leaf first:
1) normalize contact phones into comparison keys
2) group a session's conversations by key
3) rank each group and pick the survivor
4) plan the merge (read-only, also in simulation mode)
5) execute the plan (reassign messages, then remove duplicates)
6) aggregate per-session and run-wide counters

``ConversationMergeEngine.merge_pair`` skips stages 1-3 for two conversations
the operator picked by hand.
"""

from __future__ import annotations

from .engine import (
    ConversationMergeEngine,
    ConversationNotFoundError,
    NoMatchingSessionsError,
    PairMergeError,
)
from .execute import (
    ExecutionResult,
    MergeInterruptedError,
    MissingSurvivorError,
    SimulatedPlanError,
    execute_merge_plan,
)
from .group import ConversationGroups, group_conversations
from .normalize import (
    DEFAULT_COUNTRY_CODE,
    MIN_KEY_LENGTH,
    PhoneNormalizer,
    is_usable_key,
    normalize_phone,
)
from .plan import DuplicateEntry, MergePlan, SurvivorNotInGroupError, build_merge_plan
from .report import LoggingMergeListener, MergeReport, SessionReport
from .selection import (
    CANONICAL_CHANNEL_SUFFIX,
    EmptyGroupError,
    rank_conversations,
    score_conversation,
    select_survivor,
)

__all__ = [
    "CANONICAL_CHANNEL_SUFFIX",
    "DEFAULT_COUNTRY_CODE",
    "MIN_KEY_LENGTH",
    "ConversationGroups",
    "ConversationMergeEngine",
    "ConversationNotFoundError",
    "DuplicateEntry",
    "EmptyGroupError",
    "ExecutionResult",
    "LoggingMergeListener",
    "MergeInterruptedError",
    "MergePlan",
    "MergeReport",
    "MissingSurvivorError",
    "NoMatchingSessionsError",
    "PairMergeError",
    "PhoneNormalizer",
    "SessionReport",
    "SimulatedPlanError",
    "SurvivorNotInGroupError",
    "build_merge_plan",
    "execute_merge_plan",
    "group_conversations",
    "is_usable_key",
    "normalize_phone",
    "rank_conversations",
    "score_conversation",
    "select_survivor",
]
