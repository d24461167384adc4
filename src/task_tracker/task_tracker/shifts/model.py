from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class Shift:
    """A tenant's batch: the working hours a productivity report is measured against."""

    shift_id: int
    subdomain: str
    batch_name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
