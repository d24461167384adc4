"""Worker side of the chat: one feed built from the worker's own comment threads."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Optional

from ..chats import inbox
from ..chats.model import ChatMessage, MessageDay
from ..comments.serializers import comment_from_dict
from ..common.datetime_utils import now_utc
from ..core.constants import MISSING_TENANT_MESSAGE, WORKER_POLL_INTERVAL_SECONDS
from ..core.enums import Sender
from .base import ApiError, require_client_tenant
from .comment_client import CommentClient

LOG = logging.getLogger(__name__)


def worker_day_label(value: datetime, today: date) -> str:
    if value.date() == today:
        return "Today"
    if value.date() == today - timedelta(days=1):
        return "Yesterday"
    return value.strftime("%d %b %Y")


class WorkerChat:
    def __init__(self, client: CommentClient, subdomain: Optional[str]):
        self._client = client
        self._subdomain = subdomain
        self.messages: list[ChatMessage] = []

    def refresh(self) -> list[ChatMessage]:
        comments = [comment_from_dict(c) for c in self._client.get_my_comments() or []]
        self.messages = inbox.merge_messages(comments)
        return self.messages

    @property
    def unread_admin_count(self) -> int:
        return sum(1 for m in self.messages if m.sender == Sender.ADMIN and m.is_new)

    def send(self, text: Optional[str]) -> Optional[dict]:
        """Create a new comment thread; blank text is ignored."""
        text = (text or "").strip()
        if not text:
            return None
        subdomain = require_client_tenant(self._subdomain, MISSING_TENANT_MESSAGE)
        created = self._client.create_comment(text=text, subdomain=subdomain)
        self.refresh()
        return created

    def mark_read(self, comment_id: int) -> None:
        self._client.mark_comment_admin_replies_as_read(comment_id)
        self.refresh()

    def mark_all_read(self) -> None:
        self._client.mark_admin_replies_as_read()
        self.refresh()

    def grouped_by_day(self, today: Optional[date] = None) -> list[MessageDay]:
        # Message times are naive UTC, so "today" is the UTC date too.
        today = today or now_utc().date()
        return inbox.group_by_day(self.messages, label=lambda value: worker_day_label(value, today))

    def poll(self, stop_event: threading.Event, interval: float = WORKER_POLL_INTERVAL_SECONDS) -> None:
        """Refresh every ``interval`` seconds until ``stop_event`` is set."""
        while not stop_event.is_set():
            try:
                self.refresh()
            except ApiError as e:
                LOG.warning("Chat refresh failed: %s", e)
            except (KeyError, ValueError, TypeError) as e:
                LOG.warning("Chat refresh returned a malformed payload: %r", e)
            if stop_event.wait(interval):
                break
