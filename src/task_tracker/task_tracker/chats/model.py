from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..comments.model import Attachment
from ..core.enums import Sender


@dataclass(frozen=True)
class ChatGroup:
    group_id: int
    subdomain: str
    name: str
    member_ids: tuple[int, ...]
    created_by: int
    created_at: datetime


@dataclass(frozen=True)
class ChatSummary:
    """One entry of the admin chat list: a worker conversation or a group."""

    chat_id: int
    is_group: bool
    name: str
    unread_count: int = 0
    username: Optional[str] = None
    photo: Optional[str] = None
    department_name: Optional[str] = None
    member_ids: tuple[int, ...] = field(default_factory=tuple)
    last_activity_at: Optional[datetime] = None


@dataclass(frozen=True)
class ChatMessage:
    message_id: str
    comment_id: int
    sender: Sender
    text: str
    created_at: datetime
    is_new: bool = False
    attachment: Optional[Attachment] = None

    @property
    def is_worker(self) -> bool:
        return self.sender == Sender.WORKER


@dataclass(frozen=True)
class MessageDay:
    label: str
    messages: tuple[ChatMessage, ...]
