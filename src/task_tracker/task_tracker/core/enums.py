from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    WORKER = "worker"


class ChatFilter(str, Enum):
    """Admin inbox list filters."""

    ALL = "All"
    UNREAD = "Unread"
    GROUPS = "Groups"


class Sender(str, Enum):
    """Who wrote a chat message."""

    WORKER = "worker"
    ADMIN = "admin"
