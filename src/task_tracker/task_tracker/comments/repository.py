from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attachment, Comment, Reply


class CommentRepository(Protocol):
    """Store of comments with their replies.

    Listing methods return comments newest first, each with its replies in
    creation order and the worker joined (``worker`` is None for orphans).
    """

    def create(
        self,
        *,
        worker_id: int,
        subdomain: str,
        text: str,
        attachment: Optional[Attachment],
        now: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, comment_id: int) -> Optional[Comment]:
        raise NotImplementedError

    def list_by_worker(self, worker_id: int) -> Sequence[Comment]:
        raise NotImplementedError

    def list_by_tenant(self, subdomain: str) -> Sequence[Comment]:
        raise NotImplementedError

    def list_with_unread_admin_replies(self, worker_id: int) -> Sequence[Comment]:
        raise NotImplementedError

    def append_reply(
        self,
        *,
        comment_id: int,
        text: str,
        is_admin_reply: bool,
        subdomain: str,
        now: datetime,
    ) -> Reply:
        """Insert the reply and update the parent flags in one transaction.

        The parent always becomes ``is_new``; an admin reply also sets
        ``has_unread_admin_reply`` and ``last_reply_at``.
        """

        raise NotImplementedError

    def mark_read(self, comment_id: int, *, now: datetime) -> bool:
        """Clear ``is_new`` on the comment and all replies (and the admin-reply flag)."""

        raise NotImplementedError

    def mark_admin_replies_read(self, comment_id: int, *, now: datetime) -> bool:
        raise NotImplementedError

    def mark_all_admin_replies_read(self, worker_id: int, *, now: datetime) -> int:
        """Return how many comments had unread admin replies."""

        raise NotImplementedError
