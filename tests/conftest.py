from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.task_tracker.task_tracker.chats.model import ChatGroup
from src.task_tracker.task_tracker.comments.model import Attachment, Comment, Reply, WorkerRef
from src.task_tracker.task_tracker.container import assemble_container
from src.task_tracker.task_tracker.core.enums import Role
from src.task_tracker.task_tracker.main import create_app
from src.task_tracker.task_tracker.reports.model import AttendancePunch
from src.task_tracker.task_tracker.shifts.model import Shift
from src.task_tracker.task_tracker.users.model import User
from src.task_tracker.task_tracker.users.service import SessionUser

ADMIN_ID = 1
ALICE_ID = 2
BOB_ID = 3
OTHER_ADMIN_ID = 10
OTHER_WORKER_ID = 11


class FakeClock:
    def __init__(self, start: datetime = datetime(2025, 3, 4, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self.departments: dict[int, str] = {}

    def add(self, user: User) -> User:
        self.users[user.user_id] = user
        return user

    def remove(self, user_id: int) -> None:
        self.users.pop(user_id, None)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_username(self, *, subdomain: str, username: str) -> Optional[User]:
        for u in self.users.values():
            if u.subdomain == subdomain and u.username == username:
                return u
        return None

    def list_workers(self, *, subdomain: str):
        return [u for u in self.users.values() if u.subdomain == subdomain and u.role == Role.WORKER and u.is_active]


class InMemoryComments:
    """Mirrors the MySQL repository: workers are joined at read time."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._comments: dict[int, Comment] = {}
        self._next_comment = 0
        self._next_reply = 0
        self.fail_on_create = False

    def _joined(self, comment: Comment) -> Comment:
        user = self._users.get_by_id(comment.worker_id)
        worker = None
        if user is not None:
            worker = WorkerRef(
                worker_id=user.user_id,
                name=user.full_name,
                username=user.username,
                photo=user.photo,
                department_name=self._users.departments.get(user.dept_id),
            )
        return replace(comment, worker=worker)

    def _listed(self, predicate):
        found = [self._joined(c) for c in self._comments.values() if predicate(c)]
        found.sort(key=lambda c: (c.created_at, c.comment_id), reverse=True)
        return found

    def create(self, *, worker_id: int, subdomain: str, text: str, attachment: Optional[Attachment], now: datetime) -> int:
        if self.fail_on_create:
            raise RuntimeError("database is down")
        self._next_comment += 1
        self._comments[self._next_comment] = Comment(
            comment_id=self._next_comment,
            worker_id=int(worker_id),
            subdomain=subdomain,
            text=text,
            created_at=now,
            updated_at=now,
            attachment=attachment,
        )
        return self._next_comment

    def get_by_id(self, comment_id: int) -> Optional[Comment]:
        comment = self._comments.get(int(comment_id))
        return self._joined(comment) if comment else None

    def list_by_worker(self, worker_id: int):
        return self._listed(lambda c: c.worker_id == int(worker_id))

    def list_by_tenant(self, subdomain: str):
        return self._listed(lambda c: c.subdomain == subdomain)

    def list_with_unread_admin_replies(self, worker_id: int):
        return self._listed(lambda c: c.worker_id == int(worker_id) and c.has_unread_admin_reply)

    def append_reply(self, *, comment_id: int, text: str, is_admin_reply: bool, subdomain: str, now: datetime) -> Reply:
        comment = self._comments[int(comment_id)]
        self._next_reply += 1
        reply = Reply(
            reply_id=self._next_reply,
            comment_id=comment.comment_id,
            text=text,
            is_admin_reply=is_admin_reply,
            is_new=True,
            subdomain=subdomain,
            created_at=now,
        )
        changes = {"replies": comment.replies + (reply,), "is_new": True, "updated_at": now}
        if is_admin_reply:
            changes.update(has_unread_admin_reply=True, last_reply_at=now)
        self._comments[comment.comment_id] = replace(comment, **changes)
        return reply

    def mark_read(self, comment_id: int, *, now: datetime) -> bool:
        comment = self._comments.get(int(comment_id))
        if comment is None:
            return False
        self._comments[comment.comment_id] = replace(
            comment,
            is_new=False,
            has_unread_admin_reply=False,
            updated_at=now,
            replies=tuple(replace(r, is_new=False) for r in comment.replies),
        )
        return True

    def mark_admin_replies_read(self, comment_id: int, *, now: datetime) -> bool:
        comment = self._comments.get(int(comment_id))
        if comment is None:
            return False
        self._comments[comment.comment_id] = replace(
            comment,
            has_unread_admin_reply=False,
            updated_at=now,
            replies=tuple(replace(r, is_new=False) if r.is_admin_reply else r for r in comment.replies),
        )
        return True

    def mark_all_admin_replies_read(self, worker_id: int, *, now: datetime) -> int:
        ids = [c.comment_id for c in self._comments.values() if c.worker_id == int(worker_id) and c.has_unread_admin_reply]
        for comment_id in ids:
            self.mark_admin_replies_read(comment_id, now=now)
        return len(ids)


class InMemoryChats:
    def __init__(self):
        self.cursors: dict[tuple[str, int, int], datetime] = {}
        self.hidden: dict[tuple[str, int], datetime] = {}
        self.groups: dict[int, ChatGroup] = {}
        self._next_group = 0

    def get_read_cursors(self, *, subdomain: str, reader_id: int):
        return {w: at for (s, r, w), at in self.cursors.items() if s == subdomain and r == reader_id}

    def set_read_cursors(self, *, subdomain: str, reader_id: int, worker_ids, at: datetime) -> None:
        for w in worker_ids:
            self.cursors[(subdomain, reader_id, int(w))] = at

    def list_hidden_workers(self, *, subdomain: str):
        return {w for (s, w) in self.hidden if s == subdomain}

    def hide_workers(self, *, subdomain: str, worker_ids, at: datetime) -> None:
        for w in worker_ids:
            self.hidden[(subdomain, int(w))] = at

    def unhide_worker(self, *, subdomain: str, worker_id: int) -> bool:
        return self.hidden.pop((subdomain, int(worker_id)), None) is not None

    def list_groups(self, *, subdomain: str):
        groups = [g for g in self.groups.values() if g.subdomain == subdomain]
        groups.sort(key=lambda g: (g.created_at, g.group_id), reverse=True)
        return groups

    def create_group(self, *, subdomain: str, name: str, member_ids, created_by: int, at: datetime) -> int:
        self._next_group += 1
        self.groups[self._next_group] = ChatGroup(
            group_id=self._next_group,
            subdomain=subdomain,
            name=name,
            member_ids=tuple(member_ids),
            created_by=created_by,
            created_at=at,
        )
        return self._next_group

    def delete_group(self, *, subdomain: str, group_id: int) -> bool:
        group = self.groups.get(int(group_id))
        if group is None or group.subdomain != subdomain:
            return False
        del self.groups[group.group_id]
        return True


class InMemoryShifts:
    def __init__(self, shifts=()):
        self.shifts = list(shifts)

    def list_for_tenant(self, subdomain: str):
        return [s for s in self.shifts if s.subdomain == subdomain]

    def get_by_name(self, *, subdomain: str, batch_name: str):
        for s in self.shifts:
            if s.subdomain == subdomain and s.batch_name == batch_name:
                return s
        return None


class InMemoryAttendance:
    def __init__(self):
        self.punches: list[AttendancePunch] = []
        self.last_args: Optional[dict] = None

    def punch(self, worker_id: int, at: datetime, presence: bool, *, subdomain: str = "acme", **extra) -> None:
        self.punches.append(
            AttendancePunch(
                punch_id=len(self.punches) + 1,
                subdomain=subdomain,
                worker_id=worker_id,
                punched_at=at,
                presence=presence,
                **extra,
            )
        )

    def list_for_worker(self, *, subdomain: str, worker_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None):
        self.last_args = {"subdomain": subdomain, "worker_id": worker_id, "start_date": start_date, "end_date": end_date}
        found = [
            p
            for p in self.punches
            if p.subdomain == subdomain
            and p.worker_id == worker_id
            and (start_date is None or p.punched_at.date() >= start_date)
            and (end_date is None or p.punched_at.date() <= end_date)
        ]
        return sorted(found, key=lambda p: p.punched_at)


def _user(user_id: int, name: str, username: str, role: Role, subdomain: str, dept_id=None) -> User:
    return User(
        user_id=user_id,
        full_name=name,
        username=username,
        password_hash=generate_password_hash("secret123", method="pbkdf2:sha256:1000"),
        role=role,
        subdomain=subdomain,
        dept_id=dept_id,
        photo=f"/photos/{username}.png",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def users() -> InMemoryUsers:
    repo = InMemoryUsers()
    repo.departments = {1: "Production", 2: "Packing"}
    repo.add(_user(ADMIN_ID, "Acme Admin", "admin", Role.ADMIN, "acme"))
    repo.add(_user(ALICE_ID, "Alice Worker", "alice", Role.WORKER, "acme", dept_id=1))
    repo.add(_user(BOB_ID, "Bob Packer", "bob", Role.WORKER, "acme", dept_id=2))
    repo.add(_user(OTHER_ADMIN_ID, "Globex Admin", "admin", Role.ADMIN, "globex"))
    repo.add(_user(OTHER_WORKER_ID, "Gus Globex", "gus", Role.WORKER, "globex"))
    return repo


@pytest.fixture
def comments(users) -> InMemoryComments:
    return InMemoryComments(users)


@pytest.fixture
def chats() -> InMemoryChats:
    return InMemoryChats()


@pytest.fixture
def shifts() -> InMemoryShifts:
    return InMemoryShifts(
        [
            Shift(shift_id=1, subdomain="acme", batch_name="Day", start_time=time(8, 0), end_time=time(17, 0), break_minutes=60),
            Shift(shift_id=2, subdomain="acme", batch_name="Evening", start_time=time(14, 0), end_time=time(22, 0), break_minutes=30),
        ]
    )


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def container(users, comments, chats, shifts, attendance, clock):
    return assemble_container(
        users_repo=users,
        comments_repo=comments,
        chats_repo=chats,
        shifts_repo=shifts,
        attendance_repo=attendance,
        secret_key="test-secret",
        token_max_age=3600,
        clock=clock,
    )


@pytest.fixture
def session_user(users):
    def make(user_id: int) -> SessionUser:
        return SessionUser.from_user(users.get_by_id(user_id))

    return make


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def http(app):
    return app.test_client()


@pytest.fixture
def auth_headers(container, session_user):
    def make(user_id: int) -> dict:
        token = container.auth_service.issue_token(session_user(user_id))
        return {"Authorization": f"Bearer {token}"}

    return make
