"""
Time and slot helper functions.
"""

from datetime import datetime, date, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dateutil import parser as date_parser

from ..core.time_slot import BusyPeriod


def parse_time(time_str: Optional[str], default: Tuple[int, int] = (9, 0)) -> Tuple[int, int]:
    """Parse "HH:MM" into (hours, minutes). Missing or malformed parts use the default."""
    if not time_str:
        return default
    parts = time_str.split(":")
    try:
        hours = int(parts[0])
    except (ValueError, IndexError):
        hours = default[0]
    try:
        minutes = int(parts[1])
    except (ValueError, IndexError):
        minutes = default[1]
    return hours, minutes


def minute_of_day(moment) -> int:
    return moment.hour * 60 + moment.minute


def sunday_based_weekday(day: date) -> int:
    """Weekday index with Sunday=0 ... Saturday=6 (Python's weekday() has Monday=0)."""
    return (day.weekday() + 1) % 7


def round_up_to_interval(moment: datetime, interval_minutes: int) -> datetime:
    """Round up to the next interval boundary; exact boundaries stay put."""
    moment = moment.replace(second=0, microsecond=0) + (
        timedelta(minutes=1) if moment.second or moment.microsecond else timedelta()
    )
    remainder = moment.minute % interval_minutes
    if remainder:
        moment += timedelta(minutes=interval_minutes - remainder)
    return moment


def at_time(day: date, hours: int, minutes: int) -> datetime:
    """Wall-clock datetime on ``day``; 24:00 maps to the following midnight."""
    return datetime.combine(day, time(0, 0)) + timedelta(hours=hours, minutes=minutes)


def to_local_naive(moment: datetime, tz=None) -> datetime:
    """Convert an aware datetime into naive wall-clock time of ``tz``."""
    if moment.tzinfo is None:
        return moment
    if tz is not None:
        moment = moment.astimezone(tz)
    return moment.replace(tzinfo=None)


def _parse_event_boundary(boundary: Optional[Dict[str, Any]], tz=None) -> Optional[datetime]:
    if not boundary:
        return None
    if boundary.get("dateTime"):
        return to_local_naive(date_parser.isoparse(boundary["dateTime"]), tz)
    if boundary.get("date"):
        # All-day events start at local midnight
        return datetime.combine(date_parser.isoparse(boundary["date"]).date(), time(0, 0))
    return None


def event_to_busy_period(event: Dict[str, Any], tz=None) -> Optional[BusyPeriod]:
    """Turn a calendar event dict into a busy period, or None if it has no usable times."""
    start = _parse_event_boundary(event.get("start"), tz)
    end = _parse_event_boundary(event.get("end"), tz)
    if start is None or end is None:
        return None
    return BusyPeriod(start, end)


def merge_busy_periods(*sources: Iterable[BusyPeriod]) -> List[BusyPeriod]:
    """Combine busy period sources into one list sorted by start."""
    merged = [period for source in sources for period in source]
    merged.sort()
    return merged
