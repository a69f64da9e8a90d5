"""
Candidate slot search over the working-hours horizon.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Collection, List, Optional

from .constants import (
    SLOT_INTERVAL_MINUTES, MAX_CANDIDATES, NO_DEADLINE_HORIZON_DAYS,
    SOFT_DEADLINE_GRACE_DAYS, CALENDAR_MAX_RESULTS,
)
from .ports import CalendarReader, TaskStore
from .task import ScheduleConfig
from .time_slot import TimeSlot, BusyPeriod
from ..constraints.time_constraints import get_working_time_range, has_conflict
from ..scoring.slot_scoring import calculate_slot_score
from ..utils.slot_utils import (
    parse_time, round_up_to_interval, event_to_busy_period, merge_busy_periods,
)

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Scans working days between now and the search horizon in 15-minute steps,
    drops candidates that collide with calendar events or already placed tasks,
    and returns the survivors ranked by score (ties keep chronological order).
    """

    def __init__(self, task_store: TaskStore, calendar: Optional[CalendarReader] = None,
                 clock: Callable[[], datetime] = datetime.now, tz=None):
        self.task_store = task_store
        self.calendar = calendar
        self.clock = clock
        self.tz = tz

    def search_window_end(self, now: datetime, deadline: Optional[datetime], is_hard_deadline: bool) -> datetime:
        if deadline is None:
            return now + timedelta(days=NO_DEADLINE_HORIZON_DAYS)
        if is_hard_deadline:
            return deadline
        return deadline + timedelta(days=SOFT_DEADLINE_GRACE_DAYS)

    def find_available_slots(self, user_id: int, duration_minutes: int, deadline: Optional[datetime],
                             schedule: ScheduleConfig, ideal_start_time: Optional[str] = None,
                             is_hard_deadline: bool = False,
                             exclude_task_ids: Collection[int] = (),
                             not_before: Optional[datetime] = None) -> List[TimeSlot]:
        if duration_minutes <= 0:
            return []

        # The horizon is anchored on the real now; not_before only moves the scan start
        now = self.clock()
        max_date = self.search_window_end(now, deadline, is_hard_deadline)
        if not_before is not None and not_before > now:
            now = not_before
        if max_date <= now:
            return []

        busy_periods = self.load_busy_periods(user_id, now, max_date, exclude_task_ids)
        ideal_time = parse_time(ideal_start_time) if ideal_start_time else None
        duration = timedelta(minutes=duration_minutes)
        step = timedelta(minutes=SLOT_INTERVAL_MINUTES)

        slots: List[TimeSlot] = []
        current_day = now.date()
        while current_day <= max_date.date() and len(slots) < MAX_CANDIDATES:
            work_range = get_working_time_range(current_day, schedule)
            if work_range:
                work_start, work_end = work_range
                slot_start = max(now, work_start) if current_day == now.date() else work_start
                slot_start = round_up_to_interval(slot_start, SLOT_INTERVAL_MINUTES)

                while slot_start < work_end and len(slots) < MAX_CANDIDATES:
                    slot_end = slot_start + duration
                    if slot_end > work_end or slot_end > max_date:
                        break
                    if not has_conflict(slot_start, slot_end, busy_periods):
                        score = calculate_slot_score(slot_start, deadline, ideal_time)
                        slots.append(TimeSlot(slot_start, slot_end, score))
                    slot_start += step

            current_day += timedelta(days=1)

        # sort() is stable, so equal scores stay in scan (chronological) order
        slots.sort(key=lambda slot: slot.score, reverse=True)
        logger.debug(f"Found {len(slots)} candidate slots for user {user_id} "
                     f"({duration_minutes} min, window {now:%Y-%m-%d %H:%M} - {max_date:%Y-%m-%d %H:%M})")
        return slots

    def load_busy_periods(self, user_id: int, window_start: datetime, window_end: datetime,
                          exclude_task_ids: Collection[int] = ()) -> List[BusyPeriod]:
        calendar_periods = self.load_calendar_busy_periods(user_id, window_start, window_end)

        task_periods = []
        excluded = set(exclude_task_ids)
        for task in self.task_store.list_scheduled_tasks(user_id, window_start, window_end):
            if task.id in excluded or task.parent_chunk_id in excluded or task.scheduled_start is None:
                continue
            end = task.scheduled_end or task.scheduled_start + timedelta(minutes=task.effective_duration)
            task_periods.append(BusyPeriod(task.scheduled_start, end))

        return merge_busy_periods(calendar_periods, task_periods)

    def load_calendar_busy_periods(self, user_id: int, window_start: datetime, window_end: datetime) -> List[BusyPeriod]:
        if self.calendar is None:
            return []
        try:
            events = self.calendar.get_events(
                user_id, time_min=window_start, time_max=window_end, max_results=CALENDAR_MAX_RESULTS,
            )
        except Exception as e:
            # An unreachable calendar must not block deadline-driven scheduling
            logger.warning(f"Calendar unavailable for user {user_id}, scheduling without it: {e}")
            return []

        periods = []
        for event in events:
            try:
                period = event_to_busy_period(event, self.tz)
            except (ValueError, OverflowError):
                logger.warning(f"Skipping calendar event with unreadable times: {event.get('id')}")
                continue
            if period is not None:
                periods.append(period)
        return periods
