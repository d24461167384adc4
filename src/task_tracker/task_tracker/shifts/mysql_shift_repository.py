from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository

_SELECT_SHIFTS = """
    SELECT shift_id, subdomain, batch_name, start_time, end_time, break_minutes
    FROM shifts
"""


def _to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        subdomain=r["subdomain"],
        batch_name=r["batch_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_tenant(self, subdomain: str) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_SHIFTS} WHERE subdomain=%s ORDER BY shift_id", (subdomain,))
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_name(self, *, subdomain: str, batch_name: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_SHIFTS} WHERE subdomain=%s AND batch_name=%s", (subdomain, batch_name))
            r = fetchone(cur)
            return _to_shift(r) if r else None
