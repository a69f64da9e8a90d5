"""
Auto-scheduling API endpoints
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth import get_current_user_id
from ..scheduling import AutoScheduler
from ..schemas import (
    SchedulingResultOut, WorkspaceRequest, RescheduleSummaryOut, ETARequest, ETAResultOut,
    RefreshResultOut, DeadlineConflictOut, DeadlineConflictsOut,
)
from ..services.scheduler_service import get_auto_scheduler

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/tasks/{task_id}/schedule", response_model=SchedulingResultOut)
def schedule_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    scheduler: AutoScheduler = Depends(get_auto_scheduler),
):
    """Place a single task in the best available slot"""
    result = scheduler.schedule_task(task_id, user_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Task could not be scheduled")
    return SchedulingResultOut.model_validate(result)

@router.post("/reschedule-all", response_model=RescheduleSummaryOut)
def reschedule_all(
    request: Optional[WorkspaceRequest] = None,
    user_id: int = Depends(get_current_user_id),
    scheduler: AutoScheduler = Depends(get_auto_scheduler),
):
    """Clear and re-place every auto-scheduled task, highest priority first"""
    workspace_id = request.workspace_id if request else None
    summary = scheduler.reschedule_all(user_id, workspace_id)
    logger.info(f"Reschedule requested by user {user_id}: {summary.scheduled} scheduled, {summary.failed} failed")
    return RescheduleSummaryOut.model_validate(summary)

@router.post("/eta", response_model=ETAResultOut)
def calculate_eta(
    request: ETARequest,
    user_id: int = Depends(get_current_user_id),
    scheduler: AutoScheduler = Depends(get_auto_scheduler),
):
    return ETAResultOut.model_validate(scheduler.calculate_eta(request.scheduled_date, request.deadline))

@router.post("/etas/refresh", response_model=RefreshResultOut)
def refresh_etas(
    request: Optional[WorkspaceRequest] = None,
    user_id: int = Depends(get_current_user_id),
    scheduler: AutoScheduler = Depends(get_auto_scheduler),
):
    """Recompute the cached ETA of every deadline-bearing task"""
    workspace_id = request.workspace_id if request else None
    updated = scheduler.update_all_etas(user_id, workspace_id)
    return RefreshResultOut(success=True, updated=updated)

@router.get("/deadline-conflicts", response_model=DeadlineConflictsOut)
def deadline_conflicts(
    workspace_id: Optional[int] = Query(None),
    user_id: int = Depends(get_current_user_id),
    scheduler: AutoScheduler = Depends(get_auto_scheduler),
):
    conflicts = scheduler.check_deadline_conflicts(user_id, workspace_id)
    return DeadlineConflictsOut(conflicts=[DeadlineConflictOut.model_validate(c) for c in conflicts])
