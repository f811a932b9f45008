"""Location of the conversation store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "convmerge"
DATABASE_FILENAME: Final[str] = "convmerge.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    base = os.getenv("XDG_DATA_HOME")
    base_path = Path(base) if base else Path.home() / ".local" / "share"
    return base_path / APP_DIR_NAME


def get_database_config() -> DatabaseConfig:
    """Return ``DATABASE_URI`` or a sqlite file under the data directory.

    The data directory is ``CONVMERGE_DATA_DIR`` when set, otherwise
    ``$XDG_DATA_HOME/convmerge``. It is created when the sqlite fallback is used.
    """

    uri = optional_env_var("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)

    raw_dir = optional_env_var("CONVMERGE_DATA_DIR")
    data_dir = (Path(raw_dir) if raw_dir else default_data_dir()).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}")
