"""
Deadline-risk (ETA) calculation.
"""

from datetime import datetime
from typing import Callable, Optional

from ..core.constants import ON_TRACK, AT_RISK, OVERDUE
from ..core.task import ETAResult


def days_between(later: datetime, earlier: datetime) -> int:
    """
    Whole 24-hour periods from ``earlier`` to ``later``, truncated toward zero.
    Negative when ``later`` is before ``earlier``.
    """
    delta = later - earlier
    if delta.total_seconds() >= 0:
        return delta.days
    return -((-delta).days)


def eta_status_for_offset(days_offset: int) -> str:
    if days_offset < 0:
        return OVERDUE
    if days_offset <= 1:
        return AT_RISK
    return ON_TRACK


def calculate_eta(scheduled_date: Optional[datetime], deadline: Optional[datetime],
                  now: Optional[Callable[[], datetime]] = None) -> ETAResult:
    """
    Classify how a task's (planned) date sits relative to its deadline.
    Without a scheduled date the current time is used.
    """
    if deadline is None:
        return ETAResult(days_offset=0, status=ON_TRACK)

    effective_date = scheduled_date if scheduled_date is not None else (now or datetime.now)()
    days_offset = days_between(deadline, effective_date)
    return ETAResult(days_offset=days_offset, status=eta_status_for_offset(days_offset))
