"""
Working-hours policy resolution.

A task's policy comes from, in order: the named schedule it references, the
owner's default work-hours preference, or the system default (Mon-Fri 09:00-17:00).
"""

import json
import logging
from typing import List, Optional

from ..core.constants import DAY_NAME_TO_INDEX, UNKNOWN_DAY_INDEX, DEFAULT_WORK_DAYS
from ..core.ports import PreferenceStore, ScheduleLookup
from ..core.task import ScheduleConfig, DEFAULT_SCHEDULE

logger = logging.getLogger(__name__)


def day_names_to_indices(day_names: List[str]) -> tuple:
    """Map day names to Sunday-based indices; unknown names become Monday."""
    return tuple(DAY_NAME_TO_INDEX.get(str(name).strip().lower(), UNKNOWN_DAY_INDEX) for name in day_names)


def parse_work_days(work_days_json: Optional[str]) -> List[str]:
    """Decode a stored JSON day list, defaulting to Monday-Friday."""
    if not work_days_json:
        return list(DEFAULT_WORK_DAYS)
    try:
        days = json.loads(work_days_json)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable work days {work_days_json!r}, using Monday-Friday")
        return list(DEFAULT_WORK_DAYS)
    if not isinstance(days, list):
        return list(DEFAULT_WORK_DAYS)
    return days


class ScheduleConfigResolver:
    def __init__(self, preferences: PreferenceStore, schedules: ScheduleLookup):
        self.preferences = preferences
        self.schedules = schedules

    def get_schedule_config(self, schedule_id: Optional[int], user_id: int) -> ScheduleConfig:
        if schedule_id is not None:
            schedule = self.schedules.get_schedule(schedule_id)
            if schedule is not None:
                return schedule
            logger.debug(f"Schedule {schedule_id} not found, falling back for user {user_id}")

        work_hours = self.preferences.get_work_hours(user_id)
        if work_hours and work_hours.enabled and work_hours.start_time and work_hours.end_time:
            work_days = work_hours.work_days if work_hours.work_days is not None else DEFAULT_WORK_DAYS
            return ScheduleConfig(
                start_time=work_hours.start_time,
                end_time=work_hours.end_time,
                days_of_week=day_names_to_indices(work_days),
            )

        return DEFAULT_SCHEDULE
