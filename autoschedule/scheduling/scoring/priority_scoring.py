"""
Priority-based ordering for batch scheduling.
"""

from datetime import datetime
from typing import Tuple

from ..core.constants import PRIORITY_WEIGHTS, DEFAULT_PRIORITY_WEIGHT
from ..core.task import ScheduledTask


def priority_weight(priority: str) -> int:
    """Map a free-text priority label to its weight; unknown labels weigh 10."""
    return PRIORITY_WEIGHTS.get(priority, DEFAULT_PRIORITY_WEIGHT)


def task_selection_key(task: ScheduledTask) -> Tuple[bool, datetime, int]:
    """
    Sort key for batch order: closest deadline first (tasks without one last),
    then higher priority weight first.
    """
    return (
        task.due_date is None,
        task.due_date or datetime.max,
        -priority_weight(task.priority),
    )
