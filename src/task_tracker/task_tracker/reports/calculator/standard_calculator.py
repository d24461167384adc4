from __future__ import annotations

from datetime import date
from typing import Sequence

from ...shifts.model import Shift
from ..model import AttendancePunch, DayProductivity
from .base import ProductivityCalculator


class StandardProductivityCalculator(ProductivityCalculator):
    """Standard rule: (last out - first in) - break_minutes, not below 0.

    A day is late when the first in-punch is after the batch start.
    """

    def for_day(self, work_date: date, punches: Sequence[AttendancePunch], shift: Shift) -> DayProductivity:
        ins = [p.punched_at for p in punches if p.presence]
        outs = [p.punched_at for p in punches if not p.presence]
        first_in = min(ins) if ins else None
        last_out = max(outs) if outs else None

        minutes = 0
        if first_in and last_out and last_out > first_in:
            minutes = int((last_out - first_in).total_seconds() // 60)
            minutes = max(minutes - int(shift.break_minutes or 0), 0)

        return DayProductivity(
            work_date=work_date,
            first_in=first_in,
            last_out=last_out,
            worked_minutes=minutes,
            is_late=bool(first_in and first_in.time() > shift.start_time),
        )
