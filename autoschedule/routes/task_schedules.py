"""
Named task schedule endpoints (working-hours templates tasks can reference)
"""

import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..auth import get_current_user_id
from ..database import get_db
from ..models import TaskSchedule, Task
from ..schemas import TaskScheduleCreate, TaskScheduleUpdate, TaskScheduleOut

router = APIRouter()

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_schedule_window(start_time: str, end_time: str, days_of_week: List[int]):
    for value in (start_time, end_time):
        if not TIME_PATTERN.match(value):
            raise HTTPException(status_code=400, detail=f"Invalid time '{value}', expected HH:MM")
    # Zero-padded HH:MM strings compare in clock order
    if end_time <= start_time:
        raise HTTPException(status_code=400, detail="end_time must be after start_time")
    if not days_of_week or any(day not in range(7) for day in days_of_week):
        raise HTTPException(status_code=400, detail="days_of_week must be a non-empty list of 0-6")


def clear_other_defaults(db: Session, workspace_id: Optional[int], keep_id: Optional[int] = None):
    query = db.query(TaskSchedule).filter(
        TaskSchedule.workspace_id == workspace_id,
        TaskSchedule.is_default == True,
    )
    if keep_id is not None:
        query = query.filter(TaskSchedule.id != keep_id)
    for schedule in query.all():
        schedule.is_default = False


def get_schedule_or_404(db: Session, schedule_id: int) -> TaskSchedule:
    schedule = db.query(TaskSchedule).filter(TaskSchedule.id == schedule_id).first()
    if not schedule:
        raise HTTPException(status_code=404, detail="Task schedule not found")
    return schedule


@router.get("/", response_model=List[TaskScheduleOut])
def list_task_schedules(
    workspace_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return db.query(TaskSchedule).filter(
        TaskSchedule.workspace_id == workspace_id,
    ).order_by(TaskSchedule.is_default.desc(), TaskSchedule.name).all()


@router.get("/{schedule_id}", response_model=TaskScheduleOut)
def get_task_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return get_schedule_or_404(db, schedule_id)


@router.post("/", response_model=TaskScheduleOut, status_code=201)
def create_task_schedule(
    payload: TaskScheduleCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    validate_schedule_window(payload.start_time, payload.end_time, payload.days_of_week)

    if payload.is_default:
        clear_other_defaults(db, payload.workspace_id)

    schedule = TaskSchedule(
        name=payload.name,
        start_time=payload.start_time,
        end_time=payload.end_time,
        days_of_week=sorted(set(payload.days_of_week)),
        workspace_id=payload.workspace_id,
        created_by_id=user_id,
        is_default=payload.is_default,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.put("/{schedule_id}", response_model=TaskScheduleOut)
def update_task_schedule(
    schedule_id: int,
    payload: TaskScheduleUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    schedule = get_schedule_or_404(db, schedule_id)
    changes = payload.model_dump(exclude_unset=True)

    validate_schedule_window(
        changes.get("start_time", schedule.start_time),
        changes.get("end_time", schedule.end_time),
        changes.get("days_of_week", schedule.days_of_week),
    )
    if "days_of_week" in changes:
        changes["days_of_week"] = sorted(set(changes["days_of_week"]))
    if changes.get("is_default"):
        clear_other_defaults(db, schedule.workspace_id, keep_id=schedule.id)

    for field, value in changes.items():
        setattr(schedule, field, value)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}", status_code=204)
def delete_task_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    schedule = get_schedule_or_404(db, schedule_id)
    # Detached tasks fall back to the owner's work hours
    db.execute(update(Task).where(Task.schedule_id == schedule_id).values(schedule_id=None))
    db.delete(schedule)
    db.commit()
