"""
Main scheduler class that orchestrates all scheduling operations.

Concurrency: every operation is synchronous and scoped to one user. Calls for
different users may run in parallel, but calls for the same user must be
serialized by the caller; two concurrent ``schedule_task`` calls would read the
same busy-period snapshot and could hand out overlapping slots.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .constants import AT_RISK, OVERDUE
from .ports import TaskStore, CalendarReader, PreferenceStore, ScheduleLookup
from .slot_finder import SlotFinder
from .task import (
    ScheduledTask, ScheduleConfig, ETAResult, SchedulingResult, RescheduleSummary, ConflictReport,
)
from .time_slot import TimeSlot
from ..algorithms.chunking import ChunkPlanner, should_chunk_task
from ..constraints.schedule_config import ScheduleConfigResolver
from ..scoring.eta import calculate_eta
from ..scoring.priority_scoring import task_selection_key

logger = logging.getLogger(__name__)

# ================================
# INITIALIZATION & SETUP
# ================================

class AutoScheduler:
    """
    Places auto-scheduled tasks into working-hours slots, greedily and in
    priority order. Each placement is persisted before the next search runs, so
    later tasks see earlier ones as busy.
    """
    def __init__(self, task_store: TaskStore, preferences: PreferenceStore, schedules: ScheduleLookup,
                 calendar: Optional[CalendarReader] = None, clock: Optional[Callable[[], datetime]] = None,
                 tz=None):
        self.task_store = task_store
        self.tz = tz
        self.clock = clock or self._default_clock
        self.config_resolver = ScheduleConfigResolver(preferences, schedules)
        self.slot_finder = SlotFinder(task_store, calendar, clock=self.clock, tz=tz)
        self.chunk_planner = ChunkPlanner(task_store, self.slot_finder, clock=self.clock)

    def _default_clock(self) -> datetime:
        if self.tz is None:
            return datetime.now()
        return datetime.now(self.tz).replace(tzinfo=None)

# ================================
# BUILDING BLOCKS
# ================================

    def calculate_eta(self, scheduled_date: Optional[datetime], deadline: Optional[datetime]) -> ETAResult:
        return calculate_eta(scheduled_date, deadline, self.clock)

    def get_schedule_config(self, schedule_id: Optional[int], user_id: int) -> ScheduleConfig:
        return self.config_resolver.get_schedule_config(schedule_id, user_id)

    def find_available_slots(self, user_id: int, duration_minutes: int, deadline: Optional[datetime],
                             schedule: ScheduleConfig, ideal_start_time: Optional[str] = None,
                             is_hard_deadline: bool = False) -> List[TimeSlot]:
        return self.slot_finder.find_available_slots(
            user_id, duration_minutes, deadline, schedule, ideal_start_time, is_hard_deadline,
        )

# ================================
# SINGLE TASK SCHEDULING
# ================================

    def schedule_task(self, task_id: int, user_id: int) -> Optional[SchedulingResult]:
        """
        Place one task. Returns None when the task is not eligible or no slot
        exists; in the latter case the ETA is still refreshed.
        """
        task = self.task_store.get_task(task_id)
        if task is None or not task.is_auto_scheduled or task.is_reminder_only:
            return None

        remaining = task.remaining_minutes
        if remaining <= 0:
            logger.debug(f"Task {task_id} has no remaining work, skipping")
            return None

        schedule = self.get_schedule_config(task.schedule_id, user_id)
        chunked = should_chunk_task(task)
        # A chunked task only needs room for its first piece
        search_minutes = min(remaining, task.effective_chunk_duration) if chunked else remaining
        slots = self.slot_finder.find_available_slots(
            user_id,
            search_minutes,
            task.due_date,
            schedule,
            task.ideal_start_time,
            task.is_hard_deadline,
            exclude_task_ids=(task.id,),
        )

        if not slots:
            self._record_unscheduled_eta(task)
            return None

        if chunked:
            result = self.chunk_planner.schedule_chunked_task(
                task, user_id, schedule, task.effective_chunk_duration,
            )
            if result is None:
                self._record_unscheduled_eta(task)
            return result

        best_slot = slots[0]
        eta = self.calculate_eta(best_slot.start, task.due_date)

        self.task_store.delete_chunk_children([task.id])
        self.task_store.update_task(
            task.id,
            scheduled_start=best_slot.start,
            scheduled_end=best_slot.end,
            eta_days_offset=eta.days_offset,
            eta_status=eta.status,
            total_chunks=None,
            chunk_number=None,
        )
        logger.debug(f"Task {task.id} scheduled {best_slot.start:%Y-%m-%d %H:%M}-{best_slot.end:%H:%M} "
                     f"(score {best_slot.score:g}, eta {eta.status})")

        return SchedulingResult(
            task_id=task.id,
            scheduled_start=best_slot.start,
            scheduled_end=best_slot.end,
            eta_days_offset=eta.days_offset,
            eta_status=eta.status,
        )

    def _record_unscheduled_eta(self, task: ScheduledTask):
        """Keep deadline risk visible for a task that could not be placed."""
        eta = self.calculate_eta(None, task.due_date)
        self.task_store.update_task(task.id, eta_days_offset=eta.days_offset, eta_status=eta.status)
        logger.info(f"No available slot for task {task.id} ('{task.name}'), eta {eta.status}")

# ================================
# BATCH OPERATIONS
# ================================

    def reschedule_all(self, user_id: int, workspace_id: Optional[int] = None) -> RescheduleSummary:
        """
        Clear and re-place every eligible task for the user, closest deadline
        first, then by priority weight. Safe to re-run after a partial failure.
        """
        tasks = sorted(self.task_store.list_reschedulable_tasks(user_id, workspace_id), key=task_selection_key)
        task_ids = [task.id for task in tasks]

        self.task_store.clear_schedules(task_ids)
        self.task_store.delete_chunk_children(task_ids)

        summary = RescheduleSummary()
        for task in tasks:
            try:
                result = self.schedule_task(task.id, user_id)
            except Exception:
                logger.exception(f"Failed to schedule task {task.id} for user {user_id}")
                summary.failed += 1
                continue

            if result is not None:
                summary.scheduled += 1
            else:
                summary.failed += 1

        logger.info(f"Rescheduled user {user_id}: {summary.scheduled} scheduled, {summary.failed} failed")
        return summary

    def update_all_etas(self, user_id: int, workspace_id: Optional[int] = None) -> int:
        """Recompute ETAs for deadline-bearing tasks; only changed values are written."""
        updated = 0
        for task in self.task_store.list_deadline_tasks(user_id, workspace_id):
            eta = self.calculate_eta(task.scheduled_start, task.due_date)
            if task.eta_days_offset != eta.days_offset or task.eta_status != eta.status:
                self.task_store.update_task(task.id, eta_days_offset=eta.days_offset, eta_status=eta.status)
                updated += 1
        return updated

    def check_deadline_conflicts(self, user_id: int, workspace_id: Optional[int] = None) -> List[ConflictReport]:
        """Report tasks whose cached ETA status is at risk or overdue."""
        return [
            ConflictReport(
                task_id=task.id,
                task_name=task.name,
                deadline=task.due_date,
                scheduled_date=task.scheduled_start,
                status=task.eta_status,
            )
            for task in self.task_store.list_deadline_tasks(user_id, workspace_id)
            if task.due_date is not None and task.eta_status in (AT_RISK, OVERDUE)
        ]
