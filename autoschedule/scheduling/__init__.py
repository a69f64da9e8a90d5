"""
Auto-scheduling engine

Places auto-scheduled tasks into working-hours calendar slots: slot search and
scoring, chunking of long tasks, priority-ordered batch rescheduling and
deadline-risk (ETA) tracking. Depends only on the ports in ``core.ports``.
"""

from .core.scheduler import AutoScheduler
from .core.slot_finder import SlotFinder
from .core.time_slot import TimeSlot, BusyPeriod
from .core.task import (
    ScheduledTask, ScheduleConfig, WorkHoursPreference, ETAResult, ChunkInfo,
    SchedulingResult, RescheduleSummary, ConflictReport, DEFAULT_SCHEDULE,
)
from .algorithms.chunking import ChunkPlanner
from .constraints.schedule_config import ScheduleConfigResolver
from .scoring.eta import calculate_eta

__version__ = "1.0.0"
