"""
Ports the scheduling engine depends on.

The engine only talks to these Protocols, so the SQLAlchemy/Google
implementations in ``autoschedule.services`` can be swapped for in-memory
fakes in tests.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .task import ScheduledTask, ScheduleConfig, WorkHoursPreference


class TaskStore(Protocol):
    def get_task(self, task_id: int) -> Optional[ScheduledTask]: ...

    def list_reschedulable_tasks(self, user_id: int, workspace_id: Optional[int] = None) -> List[ScheduledTask]:
        """Active, auto-scheduled, non-reminder, top-level (not chunk child) tasks."""
        ...

    def list_deadline_tasks(self, user_id: int, workspace_id: Optional[int] = None) -> List[ScheduledTask]:
        """Active tasks that carry a due date."""
        ...

    def list_scheduled_tasks(self, user_id: int, window_start: datetime, window_end: datetime) -> List[ScheduledTask]:
        """Active auto-scheduled tasks whose placement overlaps the window."""
        ...

    def update_task(self, task_id: int, **fields: Any) -> None: ...

    def clear_schedules(self, task_ids: Iterable[int]) -> None: ...

    def delete_chunk_children(self, parent_ids: Iterable[int]) -> int: ...

    def create_chunk_child(self, parent: ScheduledTask, **fields: Any) -> int: ...


class CalendarReader(Protocol):
    def get_events(
        self,
        user_id: int,
        *,
        time_min: datetime,
        time_max: datetime,
        max_results: int,
    ) -> List[Dict[str, Any]]:
        """
        Google Calendar style event dicts: ``start``/``end`` each hold either
        ``dateTime`` (ISO instant) or ``date`` (all-day). May raise when the
        calendar is unavailable.
        """
        ...


class PreferenceStore(Protocol):
    def get_work_hours(self, user_id: int) -> Optional[WorkHoursPreference]: ...


class ScheduleLookup(Protocol):
    def get_schedule(self, schedule_id: int) -> Optional[ScheduleConfig]: ...
