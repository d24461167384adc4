from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, executemany, fetchall, in_clause
from .model import ChatGroup
from .repository import ChatRepository


class MySQLChatRepository(ChatRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Read cursors --------
    def get_read_cursors(self, *, subdomain: str, reader_id: int) -> dict[int, datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT worker_id, last_read_at FROM chat_read_cursors WHERE subdomain=%s AND reader_id=%s",
                (subdomain, int(reader_id)),
            )
            return {int(r["worker_id"]): r["last_read_at"] for r in fetchall(cur)}

    def set_read_cursors(
        self,
        *,
        subdomain: str,
        reader_id: int,
        worker_ids: Sequence[int],
        at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            executemany(
                cur,
                """
                INSERT INTO chat_read_cursors(subdomain, reader_id, worker_id, last_read_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE last_read_at=VALUES(last_read_at)
                """,
                [(subdomain, int(reader_id), int(w), at) for w in worker_ids],
            )

    # -------- Hidden chats --------
    def list_hidden_workers(self, *, subdomain: str) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT worker_id FROM hidden_chats WHERE subdomain=%s", (subdomain,))
            return {int(r["worker_id"]) for r in fetchall(cur)}

    def hide_workers(self, *, subdomain: str, worker_ids: Sequence[int], at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            executemany(
                cur,
                """
                INSERT INTO hidden_chats(subdomain, worker_id, hidden_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE hidden_at=VALUES(hidden_at)
                """,
                [(subdomain, int(w), at) for w in worker_ids],
            )

    def unhide_worker(self, *, subdomain: str, worker_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM hidden_chats WHERE subdomain=%s AND worker_id=%s",
                (subdomain, int(worker_id)),
            )
            return cur.rowcount > 0

    # -------- Groups --------
    def list_groups(self, *, subdomain: str) -> Sequence[ChatGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT group_id, subdomain, name, created_by, created_at
                FROM chat_groups
                WHERE subdomain=%s
                ORDER BY created_at DESC, group_id DESC
                """,
                (subdomain,),
            )
            rows = fetchall(cur)
            if not rows:
                return []

            placeholders, ids = in_clause([int(r["group_id"]) for r in rows])
            cur.execute(
                f"SELECT group_id, worker_id FROM chat_group_members WHERE group_id IN {placeholders} ORDER BY worker_id",
                ids,
            )
            members: dict[int, List[int]] = {}
            for m in fetchall(cur):
                members.setdefault(int(m["group_id"]), []).append(int(m["worker_id"]))

            return [
                ChatGroup(
                    group_id=int(r["group_id"]),
                    subdomain=r["subdomain"],
                    name=r["name"],
                    member_ids=tuple(members.get(int(r["group_id"]), [])),
                    created_by=int(r["created_by"]),
                    created_at=r["created_at"],
                )
                for r in rows
            ]

    def create_group(
        self,
        *,
        subdomain: str,
        name: str,
        member_ids: Sequence[int],
        created_by: int,
        at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO chat_groups(subdomain, name, created_by, created_at) VALUES(%s,%s,%s,%s)",
                (subdomain, name, int(created_by), at),
            )
            group_id = int(cur.lastrowid)
            executemany(
                cur,
                "INSERT INTO chat_group_members(group_id, worker_id) VALUES(%s,%s)",
                [(group_id, int(w)) for w in member_ids],
            )
            return group_id

    def delete_group(self, *, subdomain: str, group_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM chat_groups WHERE subdomain=%s AND group_id=%s",
                (subdomain, int(group_id)),
            )
            return cur.rowcount > 0
