from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendancePunch:
    """One RFID punch: ``presence`` is True for an in-punch, False for an out-punch."""

    punch_id: int
    subdomain: str
    worker_id: int
    punched_at: datetime
    presence: bool
    worker_name: Optional[str] = None
    username: Optional[str] = None
    department_name: Optional[str] = None


@dataclass(frozen=True)
class DailyAttendance:
    """Read-model: a worker's punches for one calendar day."""

    work_date: date
    worker_id: int
    name: str
    username: Optional[str]
    department_name: str
    in_times: tuple[datetime, ...] = field(default_factory=tuple)
    out_times: tuple[datetime, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DayProductivity:
    work_date: date
    first_in: Optional[datetime]
    last_out: Optional[datetime]
    worked_minutes: int
    is_late: bool


@dataclass(frozen=True)
class ProductivityReport:
    worker_id: int
    batch_name: str
    from_date: date
    to_date: date
    days: tuple[DayProductivity, ...]

    @property
    def total_minutes(self) -> int:
        return sum(d.worked_minutes for d in self.days)

    @property
    def days_present(self) -> int:
        return sum(1 for d in self.days if d.first_in is not None)

    @property
    def late_days(self) -> int:
        return sum(1 for d in self.days if d.is_late)
