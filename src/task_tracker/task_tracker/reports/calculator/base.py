from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from ...shifts.model import Shift
from ..model import AttendancePunch, DayProductivity


class ProductivityCalculator(ABC):
    """Calculator interface (Strategy Pattern for productivity reports)."""

    @abstractmethod
    def for_day(self, work_date: date, punches: Sequence[AttendancePunch], shift: Shift) -> DayProductivity:
        raise NotImplementedError
