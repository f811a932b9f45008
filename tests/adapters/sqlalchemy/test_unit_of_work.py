from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from convmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMergeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.conversations import make_conversation, make_session

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyMergeUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyMergeUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_persists_on_commit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    session = make_session()

    with SqlAlchemyMergeUnitOfWork() as uow:
        uow.repositories.sessions.add(session)
        uow.repositories.conversations.add(make_conversation(session, "11987654321"))
        uow.commit()

    with SqlAlchemyMergeUnitOfWork() as uow:
        assert [item.id for item in uow.repositories.sessions.list_active()] == [session.id]
        assert len(uow.repositories.conversations.list_for_session(session.id)) == 1


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    session = make_session()

    with pytest.raises(RuntimeError), SqlAlchemyMergeUnitOfWork() as uow:
        uow.repositories.sessions.add(session)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyMergeUnitOfWork() as uow:
        assert uow.repositories.sessions.list_active() == []
