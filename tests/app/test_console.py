from __future__ import annotations

import io

from convmerge.domain.merging import ConversationMergeEngine
from convmerge.ui.console import ConsoleMergeListener
from tests.helpers.conversations import (
    CANONICAL_JID,
    FakeMergeUnitOfWork,
    FakeStore,
    make_conversation,
    make_session,
    seed_three_renderings,
)


def _run(store: FakeStore, *, simulate: bool) -> list[str]:
    stream = io.StringIO()
    engine = ConversationMergeEngine(
        unit_of_work_factory=lambda: FakeMergeUnitOfWork(store),
        listener=ConsoleMergeListener(stream),
    )
    engine.run(simulate=simulate)
    return stream.getvalue().splitlines()


def test_console_output_for_dry_run() -> None:
    store = FakeStore()
    session, (first, _, third) = seed_three_renderings(store)

    lines = _run(store, simulate=True)

    assert lines[0] == "DRY RUN MODE - No changes will be made"
    assert f"Processing session: {session.phone_number} ({session.id})" in lines
    assert "  Maria (+5511987654321): 3 conversations" in lines
    assert f"     -> Keeping: {CANONICAL_JID} (12 messages)" in lines
    assert f"     -> Merging: {first.remote_jid} (5 messages)" in lines
    assert f"     -> Merging: {third.remote_jid} (3 messages)" in lines
    assert "Total duplicates found: 1" in lines
    assert "Total conversations merged: 2" in lines


def test_console_output_without_duplicates() -> None:
    store = FakeStore()
    session = make_session()
    store.sessions.append(session)
    store.add_conversation(make_conversation(session, "11987654321"), 1)

    lines = _run(store, simulate=False)

    assert "DRY RUN MODE - No changes will be made" not in lines
    assert "  No duplicates found" in lines
    assert "Total duplicates found: 0" in lines
    assert "Total conversations merged: 0" in lines


def test_console_output_reports_failures() -> None:
    store = FakeStore()
    session, _ = seed_three_renderings(store)
    store.failing_sessions.add(session.id)

    lines = _run(store, simulate=False)

    assert any(line.startswith("  Error: store unavailable") for line in lines)
    assert "Sessions failed: 1" in lines
