"""Application configuration helpers."""

from __future__ import annotations

from .database import DatabaseConfig, default_data_dir, get_database_config
from .env import int_env_var, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .merge import MergeConfig, get_merge_config, parse_country_code, parse_delete_mode

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MergeConfig",
    "configure_logging",
    "default_data_dir",
    "get_database_config",
    "get_merge_config",
    "int_env_var",
    "optional_env_var",
    "parse_country_code",
    "parse_delete_mode",
]
