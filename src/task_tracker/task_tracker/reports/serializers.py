from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from .model import DailyAttendance, ProductivityReport


def _hhmm(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def _hours(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def daily_to_list(days: Iterable[DailyAttendance]) -> list[dict]:
    return [
        {
            "date": d.work_date.strftime("%Y-%m-%d"),
            "workerId": d.worker_id,
            "name": d.name,
            "username": d.username,
            "departmentName": d.department_name,
            "inTimes": [_hhmm(t) for t in d.in_times],
            "outTimes": [_hhmm(t) for t in d.out_times],
        }
        for d in days
    ]


def productivity_to_dict(report: ProductivityReport) -> dict:
    return {
        "workerId": report.worker_id,
        "batch": report.batch_name,
        "from": report.from_date.strftime("%Y-%m-%d"),
        "to": report.to_date.strftime("%Y-%m-%d"),
        "report": [
            {
                "date": d.work_date.strftime("%Y-%m-%d"),
                "firstIn": _hhmm(d.first_in),
                "lastOut": _hhmm(d.last_out),
                "workedHours": _hours(d.worked_minutes),
                "workedMinutes": d.worked_minutes,
                "late": d.is_late,
            }
            for d in report.days
        ],
        "summary": {
            "daysPresent": report.days_present,
            "lateDays": report.late_days,
            "totalMinutes": report.total_minutes,
            "totalHours": _hours(report.total_minutes),
        },
    }
