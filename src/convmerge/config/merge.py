"""Merge engine configuration."""

from __future__ import annotations

from dataclasses import dataclass

from convmerge.domain.merging.normalize import (
    DEFAULT_COUNTRY_CODE,
    MIN_KEY_LENGTH,
    PhoneNormalizer,
)
from convmerge.domain.model import DeleteMode

from .env import int_env_var, optional_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class MergeConfig:
    default_country_code: str | None = DEFAULT_COUNTRY_CODE
    min_key_length: int = MIN_KEY_LENGTH
    delete_mode: DeleteMode = DeleteMode.SOFT

    def normalizer(self) -> PhoneNormalizer:
        return PhoneNormalizer(
            default_country_code=self.default_country_code,
            min_key_length=self.min_key_length,
        )


def parse_country_code(value: str | None) -> str | None:
    """Return digits-only country code, ``None`` to disable prefixing."""

    if value is None:
        return None
    stripped = value.strip().lstrip("+")
    if not stripped:
        return None
    if not stripped.isdigit():
        raise ConfigurationError(f"Country code must contain only digits, got {value!r}")
    return stripped


def parse_delete_mode(value: str) -> DeleteMode:
    try:
        return DeleteMode(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in DeleteMode)
        raise ConfigurationError(f"Delete mode must be one of {choices}, got {value!r}") from exc


def get_merge_config() -> MergeConfig:
    raw_country_code = optional_env_var("CONVMERGE_DEFAULT_COUNTRY_CODE")
    country_code = (
        DEFAULT_COUNTRY_CODE if raw_country_code is None else parse_country_code(raw_country_code)
    )

    min_key_length = int_env_var("CONVMERGE_MIN_KEY_LENGTH", MIN_KEY_LENGTH)
    if min_key_length < 1:
        raise ConfigurationError("CONVMERGE_MIN_KEY_LENGTH must be positive")

    raw_delete_mode = optional_env_var("CONVMERGE_DELETE_MODE")
    delete_mode = parse_delete_mode(raw_delete_mode) if raw_delete_mode else DeleteMode.SOFT

    return MergeConfig(
        default_country_code=country_code,
        min_key_length=min_key_length,
        delete_mode=delete_mode,
    )
