"""Partition one session's conversations into duplicate-candidate groups."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias

from .normalize import PhoneNormalizer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from convmerge.domain.model import Conversation

ConversationGroups: TypeAlias = "dict[str, list[Conversation]]"

log = logging.getLogger(__name__)


def group_conversations(
    conversations: Iterable[Conversation],
    *,
    normalizer: PhoneNormalizer | None = None,
) -> ConversationGroups:
    """Group conversations by normalized contact phone.

    Group threads, soft-deleted conversations and conversations without a usable
    key are skipped. Only keys shared by two or more conversations are returned;
    members keep their input order.
    """

    effective = normalizer or PhoneNormalizer()
    by_key: ConversationGroups = {}
    for conversation in conversations:
        if conversation.is_group or conversation.is_deleted:
            continue
        key = effective.key_for(conversation.contact_phone)
        if key is None:
            log.debug(
                "Skipping conversation %s without usable phone %r",
                conversation.id,
                conversation.contact_phone,
            )
            continue
        by_key.setdefault(key, []).append(conversation)

    return {key: members for key, members in by_key.items() if len(members) > 1}
