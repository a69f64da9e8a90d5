from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

# ----------------- Scheduling Schemas ---------------------

class ChunkInfoOut(BaseModel):
    chunk_number: int
    total_chunks: int
    scheduled_start: datetime
    scheduled_end: datetime

    class Config:
        from_attributes = True

class SchedulingResultOut(BaseModel):
    task_id: int
    scheduled_start: datetime
    scheduled_end: datetime
    eta_days_offset: int
    eta_status: str
    chunks: Optional[List[ChunkInfoOut]] = None

    class Config:
        from_attributes = True

class WorkspaceRequest(BaseModel):
    workspace_id: Optional[int] = None

class RescheduleSummaryOut(BaseModel):
    scheduled: int
    failed: int

    class Config:
        from_attributes = True

class ETARequest(BaseModel):
    scheduled_date: Optional[datetime] = None
    deadline: Optional[datetime] = None

class ETAResultOut(BaseModel):
    days_offset: int
    status: str

    class Config:
        from_attributes = True

class RefreshResultOut(BaseModel):
    success: bool
    updated: int = 0

class DeadlineConflictOut(BaseModel):
    task_id: int
    task_name: str
    deadline: datetime
    scheduled_date: Optional[datetime] = None
    status: str

    class Config:
        from_attributes = True

class DeadlineConflictsOut(BaseModel):
    conflicts: List[DeadlineConflictOut]

# ----------------- Task Schedule Schemas ---------------------

class TaskScheduleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    start_time: str = Field(..., description="HH:MM, 24-hour")
    end_time: str = Field(..., description="HH:MM, 24-hour")
    days_of_week: List[int] = Field(..., description="0=Sunday ... 6=Saturday")
    workspace_id: Optional[int] = None
    is_default: bool = False

class TaskScheduleCreate(TaskScheduleBase):
    pass

class TaskScheduleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    is_default: Optional[bool] = None

class TaskScheduleOut(TaskScheduleBase):
    id: int
    created_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
