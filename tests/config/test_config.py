from __future__ import annotations

import logging
from pathlib import Path

import pytest

from convmerge.config import (
    ConfigurationError,
    configure_logging,
    default_data_dir,
    get_database_config,
    get_merge_config,
    parse_country_code,
    parse_delete_mode,
)
from convmerge.domain.model import DeleteMode


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CONVMERGE_DEFAULT_COUNTRY_CODE",
        "CONVMERGE_MIN_KEY_LENGTH",
        "CONVMERGE_DELETE_MODE",
        "CONVMERGE_DATA_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


def test_merge_config_defaults() -> None:
    config = get_merge_config()

    assert config.default_country_code == "55"
    assert config.min_key_length == 10
    assert config.delete_mode is DeleteMode.SOFT


def test_merge_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONVMERGE_DEFAULT_COUNTRY_CODE", "+1")
    monkeypatch.setenv("CONVMERGE_MIN_KEY_LENGTH", "11")
    monkeypatch.setenv("CONVMERGE_DELETE_MODE", "HARD")

    config = get_merge_config()

    assert config.default_country_code == "1"
    assert config.min_key_length == 11
    assert config.delete_mode is DeleteMode.HARD
    normalizer = config.normalizer()
    assert normalizer.default_country_code == "1"
    assert normalizer.min_key_length == 11


def test_blank_country_code_disables_prefixing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONVMERGE_DEFAULT_COUNTRY_CODE", "  ")

    assert get_merge_config().default_country_code is None


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CONVMERGE_MIN_KEY_LENGTH", "ten"),
        ("CONVMERGE_MIN_KEY_LENGTH", "0"),
        ("CONVMERGE_DELETE_MODE", "shred"),
        ("CONVMERGE_DEFAULT_COUNTRY_CODE", "BR"),
    ],
)
def test_invalid_merge_config(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_merge_config()


def test_parse_helpers() -> None:
    assert parse_country_code(None) is None
    assert parse_country_code("+55") == "55"
    assert parse_delete_mode(" soft ") is DeleteMode.SOFT


def test_database_config_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    data_dir = tmp_path / "store"
    monkeypatch.setenv("CONVMERGE_DATA_DIR", str(data_dir))

    uri = get_database_config().uri

    assert uri == f"sqlite+pysqlite:///{data_dir.resolve() / 'convmerge.db'}"
    assert data_dir.is_dir()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert default_data_dir() == tmp_path / "convmerge"


def test_verbose_logging_only_lowers_package_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    package_logger = logging.getLogger("convmerge")
    monkeypatch.setattr(package_logger, "level", package_logger.level)

    configure_logging(verbose=True)

    assert logging.getLogger("convmerge.domain.merging.execute").getEffectiveLevel() == (
        logging.DEBUG
    )
    assert logging.getLogger("sqlalchemy.engine").getEffectiveLevel() >= logging.WARNING

    configure_logging()

    assert package_logger.level == logging.INFO
