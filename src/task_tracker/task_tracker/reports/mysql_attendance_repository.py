from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import AttendancePunch
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_worker(
        self,
        *,
        subdomain: str,
        worker_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendancePunch]:
        sql = """
            SELECT p.punch_id, p.subdomain, p.worker_id, p.punched_at, p.presence,
                   u.full_name, u.username, d.dept_name
            FROM attendance_punches p
            LEFT JOIN users u ON u.user_id = p.worker_id
            LEFT JOIN departments d ON d.dept_id = u.dept_id
            WHERE p.subdomain=%s AND p.worker_id=%s
        """
        params: list = [subdomain, int(worker_id)]
        if start_date:
            sql += " AND p.punched_at >= %s"
            params.append(datetime.combine(start_date, time.min))
        if end_date:
            sql += " AND p.punched_at < %s"
            params.append(datetime.combine(end_date + timedelta(days=1), time.min))
        sql += " ORDER BY p.punched_at, p.punch_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendancePunch(
                    punch_id=int(r["punch_id"]),
                    subdomain=r["subdomain"],
                    worker_id=int(r["worker_id"]),
                    punched_at=r["punched_at"],
                    presence=as_bool(r["presence"]),
                    worker_name=r.get("full_name"),
                    username=r.get("username"),
                    department_name=r.get("dept_name"),
                )
                for r in fetchall(cur)
            ]
