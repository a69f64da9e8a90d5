"""
Time-related constraint checking functions.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from ..core.task import ScheduleConfig
from ..core.time_slot import BusyPeriod
from ..utils.slot_utils import parse_time, at_time, sunday_based_weekday


def is_working_day(day: date, schedule: ScheduleConfig) -> bool:
    return sunday_based_weekday(day) in schedule.days_of_week


def get_working_time_range(day: date, schedule: ScheduleConfig) -> Optional[Tuple[datetime, datetime]]:
    """The day's [start, end) working interval, or None on non-working days."""
    if not is_working_day(day, schedule):
        return None

    start_hours, start_minutes = parse_time(schedule.start_time, default=(9, 0))
    end_hours, end_minutes = parse_time(schedule.end_time, default=(17, 0))
    return at_time(day, start_hours, start_minutes), at_time(day, end_hours, end_minutes)


def has_conflict(start: datetime, end: datetime, busy_periods: Iterable[BusyPeriod]) -> bool:
    """True when [start, end) overlaps any busy period (touching edges are fine)."""
    return any(busy.overlaps(start, end) for busy in busy_periods)
