"""
Slot scoring: rates a conflict-free candidate slot. Higher is better.
"""

from datetime import datetime
from typing import Optional, Tuple

from ..core.constants import (
    BASE_SCORE, MORNING_START_HOUR, MORNING_END_HOUR, MORNING_BONUS,
    PAST_DEADLINE_PENALTY, DEADLINE_DAY_BONUS,
)
from ..utils.slot_utils import minute_of_day
from .eta import days_between


def calculate_ideal_time_penalty(slot_start: datetime, ideal_time: Optional[Tuple[int, int]]) -> float:
    """Half a point per minute of distance from the preferred start time."""
    if ideal_time is None:
        return 0.0
    ideal_minutes = ideal_time[0] * 60 + ideal_time[1]
    return abs(minute_of_day(slot_start) - ideal_minutes) / 2


def calculate_morning_bonus(slot_start: datetime) -> float:
    if MORNING_START_HOUR <= slot_start.hour < MORNING_END_HOUR:
        return MORNING_BONUS
    return 0.0


def calculate_deadline_score(slot_start: datetime, deadline: Optional[datetime]) -> float:
    if deadline is None:
        return 0.0
    days_from_deadline = days_between(deadline, slot_start)
    if days_from_deadline < 0:
        return -PAST_DEADLINE_PENALTY
    if days_from_deadline == 0:
        return DEADLINE_DAY_BONUS
    return 0.0


def calculate_slot_score(slot_start: datetime, deadline: Optional[datetime] = None,
                         ideal_time: Optional[Tuple[int, int]] = None) -> float:
    return (
        BASE_SCORE
        - calculate_ideal_time_penalty(slot_start, ideal_time)
        + calculate_morning_bonus(slot_start)
        + calculate_deadline_score(slot_start, deadline)
    )
