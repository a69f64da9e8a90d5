from sqlalchemy import String, Integer, Boolean, Enum, ForeignKey, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from typing import Optional, List
from .database import Base
import enum

# Enums

class TaskStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class EtaStatus(str, enum.Enum):
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OVERDUE = "overdue"

# Models

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Default work-hours preference, used when a task has no named schedule
    work_hours_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    work_hours_start: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)  # "HH:MM"
    work_hours_end: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)    # "HH:MM"
    work_days_json: Mapped[Optional[str]] = mapped_column(String, nullable=True)       # '["monday", ...]'

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    tasks = relationship("Task", back_populates="user", foreign_keys="Task.user_id")
    google_token = relationship("GoogleOAuthToken", back_populates="user", uselist=False)


class TaskSchedule(Base):
    __tablename__ = "task_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50))
    start_time: Mapped[str] = mapped_column(String(5))  # "HH:MM"
    end_time: Mapped[str] = mapped_column(String(5))    # "HH:MM"
    days_of_week: Mapped[List[int]] = mapped_column(JSON, default=list)  # 0=Sunday ... 6=Saturday
    workspace_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    created_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = relationship("Task", back_populates="schedule")


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, index=True)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(Enum(TaskStatus), default=TaskStatus.ACTIVE, index=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    project_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    workspace_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    # Free-text label, e.g. "1st Priority", "Big Rock", "High"
    priority: Mapped[str] = mapped_column(String, default="Quick")
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_hard_deadline: Mapped[bool] = mapped_column(Boolean, default=False)
    ideal_start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)  # "HH:MM"

    is_auto_scheduled: Mapped[bool] = mapped_column(Boolean, default=False)
    is_reminder_only: Mapped[bool] = mapped_column(Boolean, default=False)
    schedule_id: Mapped[Optional[int]] = mapped_column(ForeignKey("task_schedules.id"), nullable=True)

    # Written by the scheduler
    scheduled_start: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    scheduled_end: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    eta_days_offset: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    eta_status: Mapped[Optional[EtaStatus]] = mapped_column(Enum(EtaStatus), nullable=True)

    # Chunking fields
    chunk_duration_mins: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_chunks: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    chunk_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    parent_chunk_id: Mapped[Optional[int]] = mapped_column(ForeignKey("tasks.id"), nullable=True, index=True)
    time_spent_mins: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="tasks", foreign_keys=[user_id])
    schedule = relationship("TaskSchedule", back_populates="tasks")


class GoogleOAuthToken(Base):
    __tablename__ = "google_oauth_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    access_token: Mapped[str] = mapped_column(String, nullable=False)
    refresh_token: Mapped[str] = mapped_column(String, nullable=False)
    token_expiry: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    user = relationship("User", back_populates="google_token")
