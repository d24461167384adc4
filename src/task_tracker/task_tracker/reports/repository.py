from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendancePunch


class AttendanceRepository(Protocol):
    def list_for_worker(
        self,
        *,
        subdomain: str,
        worker_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendancePunch]:
        """Punches of one worker, oldest first; both date bounds are inclusive."""
        raise NotImplementedError
