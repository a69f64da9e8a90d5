"""
Chunking: breaking tasks longer than their chunk duration into ordered,
separately placed pieces. The first piece lives on the task itself, the rest
become child tasks linked through ``parent_chunk_id``.
"""

import logging
import math
from datetime import datetime
from typing import Callable, List, Optional

from ..core.ports import TaskStore
from ..core.slot_finder import SlotFinder
from ..core.task import ScheduledTask, ScheduleConfig, ChunkInfo, SchedulingResult
from ..scoring.eta import calculate_eta

logger = logging.getLogger(__name__)


def should_chunk_task(task: ScheduledTask) -> bool:
    return task.effective_duration > task.effective_chunk_duration


def calculate_chunk_sizes(remaining_minutes: int, chunk_minutes: int) -> List[int]:
    """
    Fixed-size pieces of ``chunk_minutes``; the last piece takes whatever is left
    so the sizes always add up to ``remaining_minutes``.
    """
    if remaining_minutes <= 0 or chunk_minutes <= 0:
        return []
    chunk_count = math.ceil(remaining_minutes / chunk_minutes)
    sizes = [chunk_minutes] * (chunk_count - 1)
    sizes.append(remaining_minutes - (chunk_count - 1) * chunk_minutes)
    return sizes


def create_chunk_name(base_name: str, chunk_number: int, total_chunks: int) -> str:
    return f"{base_name} ({chunk_number}/{total_chunks})"


class ChunkPlanner:
    def __init__(self, task_store: TaskStore, slot_finder: SlotFinder,
                 clock: Callable[[], datetime] = datetime.now):
        self.task_store = task_store
        self.slot_finder = slot_finder
        self.clock = clock

    def plan_chunks(self, task: ScheduledTask, user_id: int, schedule: ScheduleConfig,
                    chunk_sizes: List[int]) -> List[ChunkInfo]:
        """
        Place each chunk in turn. Every chunk must start strictly after the
        previous one ends; planning stops at the first chunk with no slot.
        """
        total_chunks = len(chunk_sizes)
        chunks: List[ChunkInfo] = []
        last_scheduled_end: Optional[datetime] = None

        for index, chunk_minutes in enumerate(chunk_sizes):
            slots = self.slot_finder.find_available_slots(
                user_id,
                chunk_minutes,
                task.due_date,
                schedule,
                task.ideal_start_time,
                task.is_hard_deadline,
                exclude_task_ids=(task.id,),
                not_before=last_scheduled_end,
            )
            if last_scheduled_end is not None:
                slots = [slot for slot in slots if slot.start > last_scheduled_end]

            if not slots:
                logger.info(f"Chunk {index + 1}/{total_chunks} of task {task.id} has no slot; "
                            f"keeping {len(chunks)} planned chunks")
                break

            slot = slots[0]
            chunks.append(ChunkInfo(
                chunk_number=index + 1,
                total_chunks=total_chunks,
                scheduled_start=slot.start,
                scheduled_end=slot.end,
            ))
            last_scheduled_end = slot.end

        return chunks

    def schedule_chunked_task(self, task: ScheduledTask, user_id: int, schedule: ScheduleConfig,
                              chunk_duration_mins: int) -> Optional[SchedulingResult]:
        chunk_sizes = calculate_chunk_sizes(task.remaining_minutes, chunk_duration_mins)
        chunks = self.plan_chunks(task, user_id, schedule, chunk_sizes)
        if not chunks:
            return None

        total_chunks = len(chunk_sizes)
        first_chunk = chunks[0]
        eta = calculate_eta(first_chunk.scheduled_start, task.due_date, self.clock)

        # Children are regenerated on every placement
        self.task_store.delete_chunk_children([task.id])
        self.task_store.update_task(
            task.id,
            scheduled_start=first_chunk.scheduled_start,
            scheduled_end=first_chunk.scheduled_end,
            eta_days_offset=eta.days_offset,
            eta_status=eta.status,
            total_chunks=total_chunks,
            chunk_number=1,
            chunk_duration_mins=chunk_duration_mins,
        )

        for chunk in chunks[1:]:
            self.task_store.create_chunk_child(
                task,
                name=create_chunk_name(task.name, chunk.chunk_number, total_chunks),
                duration_minutes=chunk_sizes[chunk.chunk_number - 1],
                scheduled_start=chunk.scheduled_start,
                scheduled_end=chunk.scheduled_end,
                chunk_number=chunk.chunk_number,
                total_chunks=total_chunks,
                chunk_duration_mins=chunk_duration_mins,
                eta_days_offset=eta.days_offset,
                eta_status=eta.status,
            )

        logger.info(f"Task {task.id} split into {len(chunks)}/{total_chunks} chunks "
                    f"starting {first_chunk.scheduled_start:%Y-%m-%d %H:%M}")
        return SchedulingResult(
            task_id=task.id,
            scheduled_start=first_chunk.scheduled_start,
            scheduled_end=first_chunk.scheduled_end,
            eta_days_offset=eta.days_offset,
            eta_status=eta.status,
            chunks=chunks,
        )
