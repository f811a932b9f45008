"""Survivor selection within a duplicate group.

The score is a single integer whose tiers never overlap: the canonical-channel
bonus outweighs any message count, and one extra message outweighs any
difference in recency. Exact ties go to the lowest conversation id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from convmerge.domain.model import Conversation

CANONICAL_CHANNEL_SUFFIX: Final[str] = "@s.whatsapp.net"

# Unix seconds stay below this bound until the year 5138.
RECENCY_SPAN: Final[int] = 10**11
MESSAGE_WEIGHT: Final[int] = RECENCY_SPAN
MAX_MESSAGES: Final[int] = 10**9
CHANNEL_BONUS: Final[int] = MESSAGE_WEIGHT * MAX_MESSAGES


class EmptyGroupError(ValueError):
    """Raised when a survivor is requested for an empty group."""


def has_canonical_channel(conversation: Conversation) -> bool:
    return conversation.remote_jid.endswith(CANONICAL_CHANNEL_SUFFIX)


def recency_seconds(conversation: Conversation) -> int:
    if conversation.last_message_at is None:
        return 0
    return min(max(int(conversation.last_message_at.timestamp()), 0), RECENCY_SPAN - 1)


def score_conversation(conversation: Conversation, message_count: int) -> int:
    """Return the survivor score of ``conversation`` holding ``message_count`` messages."""

    score = 0
    if has_canonical_channel(conversation):
        score += CHANNEL_BONUS
    score += MESSAGE_WEIGHT * min(max(message_count, 0), MAX_MESSAGES - 1)
    score += recency_seconds(conversation)
    return score


def rank_conversations(
    group: Sequence[Conversation],
    message_counts: Mapping[UUID, int],
) -> list[Conversation]:
    """Return ``group`` ordered best first."""

    return sorted(
        group,
        key=lambda conversation: (
            -score_conversation(conversation, message_counts.get(conversation.id, 0)),
            str(conversation.id),
        ),
    )


def select_survivor(
    group: Sequence[Conversation],
    message_counts: Mapping[UUID, int],
) -> Conversation:
    if not group:
        raise EmptyGroupError("Cannot select a survivor from an empty group")
    return rank_conversations(group, message_counts)[0]
