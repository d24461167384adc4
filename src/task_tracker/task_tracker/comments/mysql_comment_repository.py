from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause
from .model import Attachment, Comment, Reply, WorkerRef
from .repository import CommentRepository

_SELECT_COMMENTS = """
    SELECT c.comment_id, c.worker_id, c.subdomain, c.text,
           c.attachment_data, c.attachment_name, c.attachment_type,
           c.is_new, c.has_unread_admin_reply, c.last_reply_at,
           c.created_at, c.updated_at,
           u.user_id AS w_user_id, u.full_name AS w_name, u.username AS w_username,
           u.photo AS w_photo, d.dept_name AS w_dept_name
    FROM comments c
    LEFT JOIN users u ON u.user_id = c.worker_id
    LEFT JOIN departments d ON d.dept_id = u.dept_id
"""


def _to_reply(row: Dict[str, Any]) -> Reply:
    return Reply(
        reply_id=int(row["reply_id"]),
        comment_id=int(row["comment_id"]),
        text=row["text"],
        is_admin_reply=as_bool(row["is_admin_reply"]),
        is_new=as_bool(row["is_new"]),
        subdomain=row["subdomain"],
        created_at=row["created_at"],
    )


def _to_comment(row: Dict[str, Any], replies: Sequence[Reply]) -> Comment:
    attachment = None
    if row.get("attachment_data") is not None:
        attachment = Attachment(
            data=row["attachment_data"],
            name=row.get("attachment_name") or "",
            type=row.get("attachment_type") or "",
        )

    worker = None
    if row.get("w_user_id") is not None:
        worker = WorkerRef(
            worker_id=int(row["w_user_id"]),
            name=row["w_name"],
            username=row.get("w_username"),
            photo=row.get("w_photo"),
            department_name=row.get("w_dept_name"),
        )

    return Comment(
        comment_id=int(row["comment_id"]),
        worker_id=int(row["worker_id"]),
        subdomain=row["subdomain"],
        text=row["text"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_new=as_bool(row["is_new"]),
        has_unread_admin_reply=as_bool(row["has_unread_admin_reply"]),
        last_reply_at=row.get("last_reply_at"),
        attachment=attachment,
        replies=tuple(replies),
        worker=worker,
    )


class MySQLCommentRepository(CommentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, where: str, params: tuple) -> List[Comment]:
        cur.execute(
            f"{_SELECT_COMMENTS} WHERE {where} ORDER BY c.created_at DESC, c.comment_id DESC",
            params,
        )
        rows = fetchall(cur)
        if not rows:
            return []

        placeholders, ids = in_clause([int(r["comment_id"]) for r in rows])
        cur.execute(
            f"""
            SELECT reply_id, comment_id, subdomain, text, is_admin_reply, is_new, created_at
            FROM comment_replies
            WHERE comment_id IN {placeholders}
            ORDER BY created_at, reply_id
            """,
            ids,
        )
        replies_by_comment: dict[int, list[Reply]] = {}
        for r in fetchall(cur):
            reply = _to_reply(r)
            replies_by_comment.setdefault(reply.comment_id, []).append(reply)

        return [_to_comment(r, replies_by_comment.get(int(r["comment_id"]), [])) for r in rows]

    def create(
        self,
        *,
        worker_id: int,
        subdomain: str,
        text: str,
        attachment: Optional[Attachment],
        now: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO comments(
                    worker_id, subdomain, text,
                    attachment_data, attachment_name, attachment_type,
                    is_new, has_unread_admin_reply, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,1,0,%s,%s)
                """,
                (
                    int(worker_id),
                    subdomain,
                    text,
                    attachment.data if attachment else None,
                    attachment.name if attachment else None,
                    attachment.type if attachment else None,
                    now,
                    now,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, comment_id: int) -> Optional[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            found = self._load(cur, "c.comment_id=%s", (int(comment_id),))
            return found[0] if found else None

    def list_by_worker(self, worker_id: int) -> Sequence[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur, "c.worker_id=%s", (int(worker_id),))

    def list_by_tenant(self, subdomain: str) -> Sequence[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur, "c.subdomain=%s", (subdomain,))

    def list_with_unread_admin_replies(self, worker_id: int) -> Sequence[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur, "c.worker_id=%s AND c.has_unread_admin_reply=1", (int(worker_id),))

    def append_reply(
        self,
        *,
        comment_id: int,
        text: str,
        is_admin_reply: bool,
        subdomain: str,
        now: datetime,
    ) -> Reply:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO comment_replies(comment_id, subdomain, text, is_admin_reply, is_new, created_at)
                VALUES(%s,%s,%s,%s,1,%s)
                """,
                (int(comment_id), subdomain, text, 1 if is_admin_reply else 0, now),
            )
            reply_id = int(cur.lastrowid)

            if is_admin_reply:
                cur.execute(
                    """
                    UPDATE comments
                    SET is_new=1, has_unread_admin_reply=1, last_reply_at=%s, updated_at=%s
                    WHERE comment_id=%s
                    """,
                    (now, now, int(comment_id)),
                )
            else:
                cur.execute(
                    "UPDATE comments SET is_new=1, updated_at=%s WHERE comment_id=%s",
                    (now, int(comment_id)),
                )

            return Reply(
                reply_id=reply_id,
                comment_id=int(comment_id),
                text=text,
                is_admin_reply=bool(is_admin_reply),
                is_new=True,
                subdomain=subdomain,
                created_at=now,
            )

    def mark_read(self, comment_id: int, *, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT comment_id FROM comments WHERE comment_id=%s FOR UPDATE", (int(comment_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE comment_replies SET is_new=0 WHERE comment_id=%s", (int(comment_id),))
            cur.execute(
                "UPDATE comments SET is_new=0, has_unread_admin_reply=0, updated_at=%s WHERE comment_id=%s",
                (now, int(comment_id)),
            )
            return True

    def mark_admin_replies_read(self, comment_id: int, *, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT comment_id FROM comments WHERE comment_id=%s FOR UPDATE", (int(comment_id),))
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE comment_replies SET is_new=0 WHERE comment_id=%s AND is_admin_reply=1",
                (int(comment_id),),
            )
            cur.execute(
                "UPDATE comments SET has_unread_admin_reply=0, updated_at=%s WHERE comment_id=%s",
                (now, int(comment_id)),
            )
            return True

    def mark_all_admin_replies_read(self, worker_id: int, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT comment_id FROM comments WHERE worker_id=%s AND has_unread_admin_reply=1 FOR UPDATE",
                (int(worker_id),),
            )
            ids = [int(r["comment_id"]) for r in fetchall(cur)]
            if not ids:
                return 0

            placeholders, params = in_clause(ids)
            cur.execute(
                f"UPDATE comment_replies SET is_new=0 WHERE is_admin_reply=1 AND comment_id IN {placeholders}",
                params,
            )
            cur.execute(
                f"UPDATE comments SET has_unread_admin_reply=0, updated_at=%s WHERE comment_id IN {placeholders}",
                (now,) + params,
            )
            return len(ids)
