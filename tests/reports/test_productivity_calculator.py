from datetime import date, datetime, time

from src.task_tracker.task_tracker.reports.calculator.standard_calculator import StandardProductivityCalculator
from src.task_tracker.task_tracker.reports.model import AttendancePunch
from src.task_tracker.task_tracker.shifts.model import Shift

DAY = Shift(shift_id=1, subdomain="acme", batch_name="Day", start_time=time(8, 0), end_time=time(17, 0), break_minutes=60)


def _punch(hour, minute, presence):
    return AttendancePunch(
        punch_id=hour * 60 + minute,
        subdomain="acme",
        worker_id=2,
        punched_at=datetime(2025, 1, 6, hour, minute),
        presence=presence,
    )


def test_standard_calculator_subtracts_break():
    punches = [_punch(8, 0, True), _punch(12, 0, False), _punch(13, 0, True), _punch(17, 0, False)]

    day = StandardProductivityCalculator().for_day(date(2025, 1, 6), punches, DAY)

    assert day.worked_minutes == 8 * 60
    assert day.is_late is False
    assert day.first_in == datetime(2025, 1, 6, 8, 0)
    assert day.last_out == datetime(2025, 1, 6, 17, 0)


def test_late_first_punch():
    day = StandardProductivityCalculator().for_day(date(2025, 1, 6), [_punch(8, 15, True), _punch(17, 0, False)], DAY)

    assert day.is_late is True
    assert day.worked_minutes == 8 * 60 + 45 - 60


def test_never_below_zero_and_missing_out():
    calc = StandardProductivityCalculator()

    short = calc.for_day(date(2025, 1, 6), [_punch(8, 0, True), _punch(8, 30, False)], DAY)
    assert short.worked_minutes == 0

    open_day = calc.for_day(date(2025, 1, 6), [_punch(8, 0, True)], DAY)
    assert open_day.worked_minutes == 0
    assert open_day.last_out is None
