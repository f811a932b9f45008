"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class MessageDirection(StrEnum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class DeleteMode(StrEnum):
    """How a merged-away conversation is removed from the store."""

    SOFT = "soft"
    HARD = "hard"
