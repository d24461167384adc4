from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_tenant
from ..core.constants import UNKNOWN_DEPARTMENT_NAME
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..users.service import SessionUser
from .calculator.base import ProductivityCalculator
from .calculator.standard_calculator import StandardProductivityCalculator
from .model import AttendancePunch, DailyAttendance, ProductivityReport
from .repository import AttendanceRepository


def _parse_date(value: Optional[str], label: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {label} date; expected YYYY-MM-DD")


def _group_by_day(punches: Sequence[AttendancePunch]) -> dict[date, list[AttendancePunch]]:
    days: dict[date, list[AttendancePunch]] = {}
    for p in sorted(punches, key=lambda p: p.punched_at):
        days.setdefault(p.punched_at.date(), []).append(p)
    return days


class AttendanceReportService:
    """Read-only attendance views for one worker."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        shifts: ShiftRepository,
        *,
        calculator: Optional[ProductivityCalculator] = None,
    ):
        self._attendance = attendance
        self._shifts = shifts
        self._calculator = calculator or StandardProductivityCalculator()

    def _tenant(self, subdomain: Optional[str], caller: Optional[SessionUser]) -> str:
        subdomain = require_tenant(subdomain)
        if caller is not None and caller.subdomain != subdomain:
            raise AuthorizationError("Not authorized for this company")
        return subdomain

    def _range(self, from_date: Optional[str], to_date: Optional[str]) -> tuple[Optional[date], Optional[date]]:
        start = _parse_date(from_date, "from")
        end = _parse_date(to_date, "to")
        if start and end and start > end:
            raise ValidationError("From date must not be after to date")
        return start, end

    def daily_view(
        self,
        *,
        subdomain: Optional[str],
        worker_id: int,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        caller: Optional[SessionUser] = None,
    ) -> list[DailyAttendance]:
        subdomain = self._tenant(subdomain, caller)
        start, end = self._range(from_date, to_date)
        punches = self._attendance.list_for_worker(
            subdomain=subdomain, worker_id=int(worker_id), start_date=start, end_date=end
        )

        out: list[DailyAttendance] = []
        for work_date, day_punches in _group_by_day(punches).items():
            first = day_punches[0]
            out.append(
                DailyAttendance(
                    work_date=work_date,
                    worker_id=first.worker_id,
                    name=first.worker_name or "Unknown",
                    username=first.username,
                    department_name=first.department_name or UNKNOWN_DEPARTMENT_NAME,
                    in_times=tuple(p.punched_at for p in day_punches if p.presence),
                    out_times=tuple(p.punched_at for p in day_punches if not p.presence),
                )
            )
        out.sort(key=lambda d: d.work_date, reverse=True)
        return out

    def _batch(self, subdomain: str, batch_name: Optional[str]) -> Shift:
        if batch_name:
            shift = self._shifts.get_by_name(subdomain=subdomain, batch_name=batch_name)
            if not shift:
                raise NotFoundError(f"Batch not found: {batch_name}")
            return shift
        shifts = self._shifts.list_for_tenant(subdomain)
        if not shifts:
            raise NotFoundError("No batches configured for this company")
        return shifts[0]

    def productivity(
        self,
        *,
        subdomain: Optional[str],
        worker_id: int,
        from_date: Optional[str],
        to_date: Optional[str],
        batch_name: Optional[str] = None,
        caller: Optional[SessionUser] = None,
    ) -> ProductivityReport:
        subdomain = self._tenant(subdomain, caller)
        start, end = self._range(from_date, to_date)
        if not start or not end:
            raise ValidationError("Both from and to dates are required")
        shift = self._batch(subdomain, batch_name)

        punches = self._attendance.list_for_worker(
            subdomain=subdomain, worker_id=int(worker_id), start_date=start, end_date=end
        )
        days = tuple(
            self._calculator.for_day(work_date, day_punches, shift)
            for work_date, day_punches in _group_by_day(punches).items()
        )
        return ProductivityReport(
            worker_id=int(worker_id),
            batch_name=shift.batch_name,
            from_date=start,
            to_date=end,
            days=days,
        )
