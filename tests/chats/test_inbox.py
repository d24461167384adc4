from __future__ import annotations

from datetime import datetime

import pytest

from src.task_tracker.task_tracker.chats import inbox
from src.task_tracker.task_tracker.chats.model import ChatSummary
from src.task_tracker.task_tracker.comments.model import Comment, Reply, WorkerRef
from src.task_tracker.task_tracker.core.enums import ChatFilter, Sender
from src.task_tracker.task_tracker.core.exceptions import ValidationError


def _worker(worker_id, name="Alice Worker"):
    return WorkerRef(worker_id=worker_id, name=name, username=name.split()[0].lower(), department_name="Production")


def _comment(comment_id, worker_id, created_at, *, replies=(), worker=None, text="hello"):
    return Comment(
        comment_id=comment_id,
        worker_id=worker_id,
        subdomain="acme",
        text=text,
        created_at=created_at,
        updated_at=created_at,
        replies=tuple(replies),
        worker=worker,
    )


def _reply(reply_id, comment_id, created_at, *, admin, is_new=True, text="reply"):
    return Reply(
        reply_id=reply_id,
        comment_id=comment_id,
        text=text,
        is_admin_reply=admin,
        is_new=is_new,
        subdomain="acme",
        created_at=created_at,
    )


def test_count_unread_ignores_admin_replies():
    t0 = datetime(2025, 3, 4, 9, 0)
    comment = _comment(
        1,
        2,
        t0,
        replies=[
            _reply(1, 1, datetime(2025, 3, 4, 9, 5), admin=True),
            _reply(2, 1, datetime(2025, 3, 4, 9, 10), admin=False),
        ],
    )

    assert inbox.count_unread([comment], None) == 2
    assert inbox.count_unread([comment], datetime(2025, 3, 4, 9, 1)) == 1
    assert inbox.count_unread([comment], datetime(2025, 3, 4, 9, 10)) == 0


def test_build_worker_chats_one_entry_per_worker():
    t = datetime(2025, 3, 4, 9, 0)
    comments = [
        _comment(3, 2, datetime(2025, 3, 4, 11, 0), worker=_worker(2)),
        _comment(2, 3, datetime(2025, 3, 4, 10, 0), worker=_worker(3, "Bob Packer")),
        _comment(1, 2, t, worker=_worker(2)),
        _comment(4, 9, t, worker=WorkerRef.placeholder()),
        _comment(5, 8, t, worker=None),
    ]

    chats = inbox.build_worker_chats(comments, hidden_worker_ids=[3])

    assert [c.chat_id for c in chats] == [2]
    assert chats[0].name == "Alice Worker"
    assert chats[0].unread_count == 2
    assert chats[0].last_activity_at == datetime(2025, 3, 4, 11, 0)


def test_filter_chats():
    chats = [
        ChatSummary(chat_id=1, is_group=True, name="Line A"),
        ChatSummary(chat_id=2, is_group=False, name="Alice Worker", unread_count=1),
        ChatSummary(chat_id=3, is_group=False, name="Bob Packer"),
    ]

    assert [c.chat_id for c in inbox.filter_chats(chats, ChatFilter.ALL)] == [1, 2, 3]
    assert [c.chat_id for c in inbox.filter_chats(chats, ChatFilter.UNREAD)] == [2]
    assert [c.chat_id for c in inbox.filter_chats(chats, ChatFilter.GROUPS)] == [1]
    assert [c.chat_id for c in inbox.filter_chats(chats, ChatFilter.ALL, "BOB")] == [3]


def test_parse_chat_filter():
    assert inbox.parse_chat_filter(None) is ChatFilter.ALL
    assert inbox.parse_chat_filter("unread") is ChatFilter.UNREAD
    with pytest.raises(ValidationError):
        inbox.parse_chat_filter("Starred")


def test_merge_messages_is_chronological_with_reply_ids():
    older = _comment(
        1,
        2,
        datetime(2025, 3, 3, 9, 0),
        replies=[_reply(7, 1, datetime(2025, 3, 4, 8, 0), admin=True)],
    )
    newer = _comment(2, 2, datetime(2025, 3, 3, 12, 0))

    messages = inbox.merge_messages([newer, older])

    assert [m.message_id for m in messages] == ["1", "2", "1-7"]
    assert [m.sender for m in messages] == [Sender.WORKER, Sender.WORKER, Sender.ADMIN]
    assert messages[2].is_new is True
    assert messages[0].is_new is False


def test_worker_replies_are_never_flagged_new():
    comment = _comment(1, 2, datetime(2025, 3, 3, 9, 0), replies=[_reply(1, 1, datetime(2025, 3, 3, 9, 1), admin=False)])

    (_, reply) = inbox.merge_messages([comment])

    assert reply.sender == Sender.WORKER
    assert reply.is_new is False


def test_group_by_day_uses_long_date_labels():
    comments = [
        _comment(1, 2, datetime(2025, 3, 3, 9, 0)),
        _comment(2, 2, datetime(2025, 3, 3, 18, 0)),
        _comment(3, 2, datetime(2025, 3, 4, 7, 0)),
    ]

    days = inbox.group_by_day(inbox.merge_messages(comments))

    assert [d.label for d in days] == ["March 03, 2025", "March 04, 2025"]
    assert [len(d.messages) for d in days] == [2, 1]


def test_latest_thread_picks_most_recent_comment():
    comments = [
        _comment(1, 2, datetime(2025, 3, 3, 9, 0)),
        _comment(5, 2, datetime(2025, 3, 4, 9, 0)),
        _comment(3, 2, datetime(2025, 3, 3, 12, 0)),
    ]

    assert inbox.latest_thread(comments).comment_id == 5
    assert inbox.latest_thread([]) is None
