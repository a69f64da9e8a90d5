"""
Value types exchanged between the scheduling engine and its ports.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from .constants import (
    DEFAULT_START_TIME, DEFAULT_END_TIME, DEFAULT_DAYS_OF_WEEK,
    DEFAULT_TASK_DURATION, DEFAULT_CHUNK_DURATION,
)


@dataclass
class ScheduledTask:
    """
    Snapshot of a task as the engine sees it. The engine reads identity,
    deadline and priority fields and only writes the scheduling fields back
    through the task store.
    """
    id: int
    user_id: int
    name: str
    duration_minutes: Optional[int] = None
    due_date: Optional[datetime] = None
    is_hard_deadline: bool = False
    ideal_start_time: Optional[str] = None
    priority: str = "Quick"
    status: str = "active"
    is_auto_scheduled: bool = False
    is_reminder_only: bool = False
    schedule_id: Optional[int] = None
    description: Optional[str] = None
    project_id: Optional[int] = None
    workspace_id: Optional[int] = None

    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    eta_days_offset: Optional[int] = None
    eta_status: Optional[str] = None

    chunk_duration_mins: Optional[int] = None
    total_chunks: Optional[int] = None
    chunk_number: Optional[int] = None
    parent_chunk_id: Optional[int] = None
    time_spent_mins: int = 0

    @property
    def effective_duration(self) -> int:
        return self.duration_minutes if self.duration_minutes is not None else DEFAULT_TASK_DURATION

    @property
    def remaining_minutes(self) -> int:
        return self.effective_duration - (self.time_spent_mins or 0)

    @property
    def effective_chunk_duration(self) -> int:
        return self.chunk_duration_mins or DEFAULT_CHUNK_DURATION


@dataclass(frozen=True)
class ScheduleConfig:
    """Working-hours policy: daily window plus allowed weekdays (0=Sunday)."""
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME
    days_of_week: Tuple[int, ...] = DEFAULT_DAYS_OF_WEEK


DEFAULT_SCHEDULE = ScheduleConfig()


@dataclass(frozen=True)
class WorkHoursPreference:
    """A user's stored default work hours, as kept by the preference store."""
    enabled: bool
    start_time: Optional[str]
    end_time: Optional[str]
    work_days: Optional[List[str]] = None


@dataclass(frozen=True)
class ETAResult:
    days_offset: int
    status: str


@dataclass
class ChunkInfo:
    chunk_number: int
    total_chunks: int
    scheduled_start: datetime
    scheduled_end: datetime


@dataclass
class SchedulingResult:
    task_id: int
    scheduled_start: datetime
    scheduled_end: datetime
    eta_days_offset: int
    eta_status: str
    chunks: Optional[List[ChunkInfo]] = None


@dataclass
class RescheduleSummary:
    scheduled: int = 0
    failed: int = 0


@dataclass
class ConflictReport:
    task_id: int
    task_name: str
    deadline: datetime
    scheduled_date: Optional[datetime]
    status: str
