from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional

from .chats.mysql_chat_repository import MySQLChatRepository
from .chats.repository import ChatRepository
from .chats.service import AdminChatService
from .comments.mysql_comment_repository import MySQLCommentRepository
from .comments.repository import CommentRepository
from .comments.service import CommentService
from .common.datetime_utils import now_utc
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .reports.mysql_attendance_repository import MySQLAttendanceRepository
from .reports.repository import AttendanceRepository
from .reports.service import AttendanceReportService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    comments_repo: CommentRepository
    chats_repo: ChatRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    comment_service: CommentService
    admin_chat_service: AdminChatService
    report_service: AttendanceReportService


def assemble_container(
    *,
    users_repo: UserRepository,
    comments_repo: CommentRepository,
    chats_repo: ChatRepository,
    shifts_repo: ShiftRepository,
    attendance_repo: AttendanceRepository,
    secret_key: str,
    token_max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    clock: Callable[[], datetime] = now_utc,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services onto the given repositories (MySQL in production, fakes in tests)."""
    auth_service = AuthService(users_repo, TokenService(secret_key, max_age_seconds=token_max_age))
    comment_service = CommentService(comments_repo, clock=clock)
    admin_chat_service = AdminChatService(comments_repo, chats_repo, users_repo, comment_service, clock=clock)
    report_service = AttendanceReportService(attendance_repo, shifts_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        comments_repo=comments_repo,
        chats_repo=chats_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        comment_service=comment_service,
        admin_chat_service=admin_chat_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: Mapping,
    secret_key: str,
    token_max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        comments_repo=MySQLCommentRepository(conn),
        chats_repo=MySQLChatRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        secret_key=secret_key,
        token_max_age=token_max_age,
        conn=conn,
    )
