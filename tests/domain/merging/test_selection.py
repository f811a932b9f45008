from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from convmerge.domain.merging.selection import (
    CHANNEL_BONUS,
    MESSAGE_WEIGHT,
    EmptyGroupError,
    rank_conversations,
    score_conversation,
    select_survivor,
)
from tests.helpers.conversations import (
    BASE_TIME,
    CANONICAL_JID,
    LEGACY_JID,
    make_conversation,
    make_session,
)


def test_score_adds_channel_messages_and_recency() -> None:
    session = make_session()
    conversation = make_conversation(session, "11987654321", remote_jid=CANONICAL_JID)

    score = score_conversation(conversation, 7)

    assert score == CHANNEL_BONUS + 7 * MESSAGE_WEIGHT + int(BASE_TIME.timestamp())


def test_score_without_activity_timestamp() -> None:
    session = make_session()
    conversation = make_conversation(
        session,
        "11987654321",
        remote_jid=LEGACY_JID,
        last_message_at=None,
    )

    assert score_conversation(conversation, 0) == 0


def test_canonical_channel_beats_more_messages_and_newer_activity() -> None:
    session = make_session()
    canonical = make_conversation(
        session,
        "11987654321",
        remote_jid=CANONICAL_JID,
        last_message_at=BASE_TIME - timedelta(days=365),
    )
    busy = make_conversation(
        session,
        "11987654321",
        remote_jid=LEGACY_JID,
        last_message_at=BASE_TIME + timedelta(days=365),
        created_offset=1,
    )
    counts = {canonical.id: 0, busy.id: 10_000}

    assert select_survivor([busy, canonical], counts) is canonical


def test_message_count_beats_recency() -> None:
    session = make_session()
    older = make_conversation(
        session,
        "11987654321",
        remote_jid="a@lid",
        last_message_at=BASE_TIME - timedelta(days=3650),
    )
    newer = make_conversation(
        session,
        "11987654321",
        remote_jid="b@lid",
        last_message_at=BASE_TIME,
        created_offset=1,
    )

    assert select_survivor([newer, older], {older.id: 2, newer.id: 1}) is older


def test_recency_flips_the_winner_when_other_terms_tie() -> None:
    session = make_session()
    first = make_conversation(session, "11987654321", remote_jid="a@lid")
    second = make_conversation(session, "11987654321", remote_jid="b@lid", created_offset=1)
    counts = {first.id: 4, second.id: 4}

    first.last_message_at = BASE_TIME + timedelta(seconds=1)
    assert select_survivor([first, second], counts) is first

    second.last_message_at = BASE_TIME + timedelta(seconds=2)
    assert select_survivor([first, second], counts) is second


def test_exact_ties_pick_the_lowest_id() -> None:
    session = make_session()
    first = make_conversation(session, "11987654321", remote_jid="a@lid")
    second = make_conversation(session, "11987654321", remote_jid="b@lid", created_offset=1)
    first.id = uuid.UUID("00000000-0000-0000-0000-000000000002")
    second.id = uuid.UUID("00000000-0000-0000-0000-000000000001")

    assert select_survivor([first, second], {}) is second
    assert select_survivor([second, first], {}) is second


def test_selection_is_repeatable() -> None:
    session = make_session()
    group = [
        make_conversation(session, "11987654321", remote_jid=f"{index}@lid", created_offset=index)
        for index in range(5)
    ]
    counts = {conversation.id: index % 2 for index, conversation in enumerate(group)}

    winners = {select_survivor(group, counts).id for _ in range(10)}

    assert len(winners) == 1


def test_rank_conversations_orders_best_first() -> None:
    session = make_session()
    low = make_conversation(session, "11987654321", remote_jid="low@lid")
    mid = make_conversation(session, "11987654321", remote_jid="mid@lid", created_offset=1)
    top = make_conversation(session, "11987654321", remote_jid=CANONICAL_JID, created_offset=2)

    ranked = rank_conversations([low, mid, top], {low.id: 1, mid.id: 3, top.id: 0})

    assert ranked == [top, mid, low]


def test_select_survivor_rejects_empty_group() -> None:
    with pytest.raises(EmptyGroupError):
        select_survivor([], {})
