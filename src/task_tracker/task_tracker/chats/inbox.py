"""Pure functions behind the chat views.

Shared by the admin inbox service and the worker chat feed in the client
package; nothing here touches storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import day_header
from ..core.constants import UNKNOWN_WORKER_NAME
from ..core.enums import ChatFilter, Sender
from ..core.exceptions import ValidationError
from ..comments.model import Comment
from .model import ChatGroup, ChatMessage, ChatSummary, MessageDay


def parse_chat_filter(value: Optional[str]) -> ChatFilter:
    if not value:
        return ChatFilter.ALL
    for item in ChatFilter:
        if item.value.lower() == value.strip().lower():
            return item
    raise ValidationError(f"Unknown chat filter: {value}")


def count_unread(comments: Iterable[Comment], last_read_at: Optional[datetime]) -> int:
    """Comments plus worker-authored replies newer than the reader's cursor.

    The admin's own replies never count as unread for the admin.
    """
    unread = 0
    for comment in comments:
        if last_read_at is None or comment.created_at > last_read_at:
            unread += 1
        for reply in comment.replies:
            if reply.is_admin_reply:
                continue
            if last_read_at is None or reply.created_at > last_read_at:
                unread += 1
    return unread


def _last_activity(comments: Sequence[Comment]) -> Optional[datetime]:
    stamps = [c.created_at for c in comments] + [r.created_at for c in comments for r in c.replies]
    return max(stamps) if stamps else None


def build_worker_chats(
    comments: Sequence[Comment],
    *,
    hidden_worker_ids: Iterable[int] = (),
    read_cursors: Optional[Mapping[int, datetime]] = None,
) -> list[ChatSummary]:
    """One chat per distinct commenting worker, in the order the comments arrive."""
    hidden = set(hidden_worker_ids)
    read_cursors = read_cursors or {}

    by_worker: dict[int, list[Comment]] = {}
    for comment in comments:
        worker = comment.worker
        if worker is None or worker.is_placeholder or worker.name == UNKNOWN_WORKER_NAME:
            continue
        if comment.worker_id in hidden:
            continue
        by_worker.setdefault(comment.worker_id, []).append(comment)

    chats: list[ChatSummary] = []
    for worker_id, worker_comments in by_worker.items():
        worker = worker_comments[0].worker
        chats.append(
            ChatSummary(
                chat_id=worker_id,
                is_group=False,
                name=worker.name,
                username=worker.username,
                photo=worker.photo,
                department_name=worker.department_name,
                unread_count=count_unread(worker_comments, read_cursors.get(worker_id)),
                last_activity_at=_last_activity(worker_comments),
            )
        )
    return chats


def group_chats(groups: Iterable[ChatGroup]) -> list[ChatSummary]:
    return [
        ChatSummary(
            chat_id=g.group_id,
            is_group=True,
            name=g.name,
            member_ids=tuple(g.member_ids),
            last_activity_at=g.created_at,
        )
        for g in groups
    ]


def filter_chats(chats: Iterable[ChatSummary], chat_filter: ChatFilter, search: str = "") -> list[ChatSummary]:
    needle = (search or "").strip().lower()
    out: list[ChatSummary] = []
    for chat in chats:
        if chat_filter == ChatFilter.UNREAD and (chat.is_group or chat.unread_count <= 0):
            continue
        if chat_filter == ChatFilter.GROUPS and not chat.is_group:
            continue
        if needle and needle not in (chat.name or "").lower():
            continue
        out.append(chat)
    return out


def merge_messages(comments: Iterable[Comment]) -> list[ChatMessage]:
    """Flatten comments and their replies into one ascending message list.

    ``is_new`` is only ever set on admin replies the worker has not read.
    """
    messages: list[ChatMessage] = []
    for comment in comments:
        messages.append(
            ChatMessage(
                message_id=str(comment.comment_id),
                comment_id=comment.comment_id,
                sender=Sender.WORKER,
                text=comment.text,
                created_at=comment.created_at,
                attachment=comment.attachment,
            )
        )
        for reply in comment.replies:
            messages.append(
                ChatMessage(
                    message_id=f"{comment.comment_id}-{reply.reply_id}",
                    comment_id=comment.comment_id,
                    sender=Sender.ADMIN if reply.is_admin_reply else Sender.WORKER,
                    text=reply.text,
                    created_at=reply.created_at,
                    is_new=reply.is_admin_reply and reply.is_new,
                )
            )
    messages.sort(key=lambda m: m.created_at)
    return messages


def group_by_day(
    messages: Iterable[ChatMessage],
    *,
    label: Callable[[datetime], str] = day_header,
) -> list[MessageDay]:
    days: list[MessageDay] = []
    current_label: Optional[str] = None
    bucket: list[ChatMessage] = []
    for message in messages:
        message_label = label(message.created_at)
        if message_label != current_label and bucket:
            days.append(MessageDay(label=current_label, messages=tuple(bucket)))
            bucket = []
        current_label = message_label
        bucket.append(message)
    if bucket:
        days.append(MessageDay(label=current_label, messages=tuple(bucket)))
    return days


def latest_thread(comments: Iterable[Comment]) -> Optional[Comment]:
    """The most recently created comment, i.e. the thread new replies go to."""
    latest: Optional[Comment] = None
    for comment in comments:
        if latest is None or (comment.created_at, comment.comment_id) > (latest.created_at, latest.comment_id):
            latest = comment
    return latest
