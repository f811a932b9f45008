"""Phone normalization into comparison keys.

A key is the digits of a phone number. National renderings (area code plus
subscriber number, 10 or 11 digits) are prefixed with a default country code so
that ``"11987654321"`` and ``"+55 11 98765-4321"`` share a key. Keys shorter than
``min_key_length`` are unusable and never take part in a merge.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

DEFAULT_COUNTRY_CODE: Final[str] = "55"
MIN_KEY_LENGTH: Final[int] = 10
NATIONAL_NUMBER_LENGTHS: Final[frozenset[int]] = frozenset({10, 11})

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(
    raw_phone: str | None,
    *,
    default_country_code: str | None = DEFAULT_COUNTRY_CODE,
) -> str:
    """Return the comparison key for ``raw_phone`` (possibly empty)."""

    if not raw_phone:
        return ""
    digits = _NON_DIGITS.sub("", raw_phone)
    if default_country_code and len(digits) in NATIONAL_NUMBER_LENGTHS:
        return default_country_code + digits
    return digits


def is_usable_key(key: str, *, min_length: int = MIN_KEY_LENGTH) -> bool:
    return len(key) >= min_length


@dataclass(frozen=True, slots=True, kw_only=True)
class PhoneNormalizer:
    """Normalization settings bundled for the grouper."""

    default_country_code: str | None = DEFAULT_COUNTRY_CODE
    min_key_length: int = MIN_KEY_LENGTH

    def normalize(self, raw_phone: str | None) -> str:
        return normalize_phone(raw_phone, default_country_code=self.default_country_code)

    def key_for(self, raw_phone: str | None) -> str | None:
        """Return a usable key or ``None`` when the phone is too weak to match on."""
        key = self.normalize(raw_phone)
        if not is_usable_key(key, min_length=self.min_key_length):
            return None
        return key
