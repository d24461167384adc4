from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..core.constants import UNASSIGNED_DEPARTMENT_NAME, UNKNOWN_WORKER_NAME


@dataclass(frozen=True)
class Attachment:
    data: str
    name: str
    type: str


@dataclass(frozen=True)
class WorkerRef:
    """Worker fields joined onto a comment (name, department, photo, username)."""

    worker_id: Optional[int]
    name: str
    username: Optional[str] = None
    photo: Optional[str] = None
    department_name: Optional[str] = None

    @classmethod
    def placeholder(cls) -> "WorkerRef":
        return cls(worker_id=None, name=UNKNOWN_WORKER_NAME, department_name=UNASSIGNED_DEPARTMENT_NAME)

    @property
    def is_placeholder(self) -> bool:
        return self.worker_id is None


@dataclass(frozen=True)
class Reply:
    """A message appended to a comment thread; only ``is_new`` ever changes."""

    reply_id: int
    comment_id: int
    text: str
    is_admin_reply: bool
    is_new: bool
    subdomain: str
    created_at: datetime


@dataclass(frozen=True)
class Comment:
    comment_id: int
    worker_id: int
    subdomain: str
    text: str
    created_at: datetime
    updated_at: datetime
    is_new: bool = True
    has_unread_admin_reply: bool = False
    last_reply_at: Optional[datetime] = None
    attachment: Optional[Attachment] = None
    replies: tuple[Reply, ...] = field(default_factory=tuple)
    # None when the worker row is gone (orphaned comment) or was not joined.
    worker: Optional[WorkerRef] = None

    def with_worker_fallback(self) -> "Comment":
        if self.worker is not None:
            return self
        return replace(self, worker=WorkerRef.placeholder())

    @property
    def unread_admin_replies(self) -> tuple[Reply, ...]:
        return tuple(r for r in self.replies if r.is_admin_reply and r.is_new)
