"""Domain model for messaging sessions and conversations."""

from __future__ import annotations

from .base import Entity, new_id
from .enums import DeleteMode, MessageDirection
from .messaging import UNNAMED_CONTACT, Conversation, Message, Session

__all__ = [
    "UNNAMED_CONTACT",
    "Conversation",
    "DeleteMode",
    "Entity",
    "Message",
    "MessageDirection",
    "Session",
    "new_id",
]
