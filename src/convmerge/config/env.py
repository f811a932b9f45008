"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, or ``None`` when unset."""

    value = os.getenv(name)
    if value is None:
        return None
    return value.strip()


def int_env_var(name: str, default: int) -> int:
    value = optional_env_var(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
