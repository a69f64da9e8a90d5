"""
SQLAlchemy implementations of the scheduling engine's ports.

Every write commits immediately: a batch reschedule relies on each placement
being visible to the next slot search.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy import select, update, delete, or_, and_
from sqlalchemy.orm import Session

from ..models import Task, TaskStatus, EtaStatus, User, TaskSchedule
from ..scheduling.constraints.schedule_config import parse_work_days
from ..scheduling.core.task import ScheduledTask, ScheduleConfig, WorkHoursPreference


def task_to_snapshot(task: Task) -> ScheduledTask:
    return ScheduledTask(
        id=task.id,
        user_id=task.user_id,
        name=task.name,
        description=task.description,
        status=task.status.value if task.status else TaskStatus.ACTIVE.value,
        priority=task.priority,
        project_id=task.project_id,
        workspace_id=task.workspace_id,
        duration_minutes=task.duration_minutes,
        due_date=task.due_date,
        is_hard_deadline=bool(task.is_hard_deadline),
        ideal_start_time=task.ideal_start_time,
        is_auto_scheduled=bool(task.is_auto_scheduled),
        is_reminder_only=bool(task.is_reminder_only),
        schedule_id=task.schedule_id,
        scheduled_start=task.scheduled_start,
        scheduled_end=task.scheduled_end,
        eta_days_offset=task.eta_days_offset,
        eta_status=task.eta_status.value if task.eta_status else None,
        chunk_duration_mins=task.chunk_duration_mins,
        total_chunks=task.total_chunks,
        chunk_number=task.chunk_number,
        parent_chunk_id=task.parent_chunk_id,
        time_spent_mins=task.time_spent_mins or 0,
    )


def _coerce_fields(fields: dict) -> dict:
    if "eta_status" in fields:
        value = fields["eta_status"]
        fields["eta_status"] = EtaStatus(value) if value is not None else None
    if "status" in fields and fields["status"] is not None:
        fields["status"] = TaskStatus(fields["status"])
    return fields


class SqlTaskStore:
    def __init__(self, db: Session):
        self.db = db

    def get_task(self, task_id: int) -> Optional[ScheduledTask]:
        task = self.db.get(Task, task_id)
        return task_to_snapshot(task) if task else None

    def _user_tasks(self, user_id: int, workspace_id: Optional[int]):
        query = select(Task).where(Task.user_id == user_id, Task.status == TaskStatus.ACTIVE)
        if workspace_id is not None:
            query = query.where(Task.workspace_id == workspace_id)
        return query

    def list_reschedulable_tasks(self, user_id: int, workspace_id: Optional[int] = None) -> List[ScheduledTask]:
        query = self._user_tasks(user_id, workspace_id).where(
            Task.is_auto_scheduled.is_(True),
            Task.is_reminder_only.is_(False),
            Task.parent_chunk_id.is_(None),
        ).order_by(Task.due_date.asc(), Task.id.asc())
        return [task_to_snapshot(task) for task in self.db.scalars(query)]

    def list_deadline_tasks(self, user_id: int, workspace_id: Optional[int] = None) -> List[ScheduledTask]:
        query = self._user_tasks(user_id, workspace_id).where(Task.due_date.is_not(None)).order_by(Task.id.asc())
        return [task_to_snapshot(task) for task in self.db.scalars(query)]

    def list_scheduled_tasks(self, user_id: int, window_start: datetime, window_end: datetime) -> List[ScheduledTask]:
        query = self._user_tasks(user_id, None).where(
            Task.is_auto_scheduled.is_(True),
            Task.scheduled_start.is_not(None),
            Task.scheduled_start < window_end,
            or_(
                Task.scheduled_end > window_start,
                and_(Task.scheduled_end.is_(None), Task.scheduled_start >= window_start),
            ),
        ).order_by(Task.scheduled_start.asc())
        return [task_to_snapshot(task) for task in self.db.scalars(query)]

    def update_task(self, task_id: int, **fields: Any) -> None:
        task = self.db.get(Task, task_id)
        if task is None:
            raise LookupError(f"Task {task_id} not found")
        for name, value in _coerce_fields(fields).items():
            setattr(task, name, value)
        self.db.commit()

    def clear_schedules(self, task_ids: Iterable[int]) -> None:
        ids = list(task_ids)
        if not ids:
            return
        self.db.execute(
            update(Task).where(Task.id.in_(ids)).values(scheduled_start=None, scheduled_end=None)
        )
        self.db.commit()

    def delete_chunk_children(self, parent_ids: Iterable[int]) -> int:
        ids = list(parent_ids)
        if not ids:
            return 0
        result = self.db.execute(delete(Task).where(Task.parent_chunk_id.in_(ids)))
        self.db.commit()
        return result.rowcount or 0

    def create_chunk_child(self, parent: ScheduledTask, **fields: Any) -> int:
        child = Task(
            user_id=parent.user_id,
            description=parent.description,
            priority=parent.priority,
            project_id=parent.project_id,
            workspace_id=parent.workspace_id,
            due_date=parent.due_date,
            is_hard_deadline=parent.is_hard_deadline,
            ideal_start_time=parent.ideal_start_time,
            schedule_id=parent.schedule_id,
            status=TaskStatus.ACTIVE,
            is_auto_scheduled=True,
            is_reminder_only=False,
            parent_chunk_id=parent.id,
            **_coerce_fields(fields),
        )
        self.db.add(child)
        self.db.commit()
        return child.id


class SqlPreferenceStore:
    def __init__(self, db: Session):
        self.db = db

    def get_work_hours(self, user_id: int) -> Optional[WorkHoursPreference]:
        user = self.db.get(User, user_id)
        if user is None:
            return None
        return WorkHoursPreference(
            enabled=bool(user.work_hours_enabled),
            start_time=user.work_hours_start,
            end_time=user.work_hours_end,
            work_days=parse_work_days(user.work_days_json),
        )


class SqlScheduleLookup:
    def __init__(self, db: Session):
        self.db = db

    def get_schedule(self, schedule_id: int) -> Optional[ScheduleConfig]:
        schedule = self.db.get(TaskSchedule, schedule_id)
        if schedule is None:
            return None
        return ScheduleConfig(
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            days_of_week=tuple(schedule.days_of_week or ()),
        )
