import logging
from typing import Optional

from sqlalchemy.orm import Session

from autoschedule.celery_app import celery_app
from autoschedule.database import SessionLocal
from autoschedule.models import Task, TaskStatus
from autoschedule.services.scheduler_service import build_auto_scheduler

logger = logging.getLogger(__name__)


def users_with_deadlines(db: Session):
    rows = db.query(Task.user_id).filter(
        Task.status == TaskStatus.ACTIVE,
        Task.due_date.isnot(None),
        Task.parent_chunk_id.is_(None),
    ).distinct().all()
    return [row[0] for row in rows]


@celery_app.task(name="autoschedule.celery_tasks.schedule.refresh_all_etas")
def refresh_all_etas():
    """Recompute cached ETAs for every user with a deadline-bearing task"""
    db: Session = SessionLocal()
    total = 0
    try:
        for user_id in users_with_deadlines(db):
            try:
                total += build_auto_scheduler(db).update_all_etas(user_id)
            except Exception:
                logger.exception(f"ETA refresh failed for user {user_id}")
                db.rollback()
    finally:
        db.close()
    logger.info(f"Hourly ETA refresh updated {total} tasks")
    return total


@celery_app.task(name="autoschedule.celery_tasks.schedule.reschedule_user")
def reschedule_user(user_id: int, workspace_id: Optional[int] = None):
    """
    Run a full reschedule for one user. Callers must not enqueue two of these
    for the same user concurrently (route them to a single queue per user).
    """
    db: Session = SessionLocal()
    try:
        summary = build_auto_scheduler(db).reschedule_all(user_id, workspace_id)
    finally:
        db.close()
    logger.info(f"Rescheduled user {user_id}: {summary.scheduled} scheduled, {summary.failed} failed")
    return {"scheduled": summary.scheduled, "failed": summary.failed}
