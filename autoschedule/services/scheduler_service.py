"""
Wires the scheduling engine to the database and Google Calendar.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from .. import settings
from ..database import get_db
from ..scheduling import AutoScheduler
from .google_calendar import GoogleCalendarReader
from .sql_store import SqlTaskStore, SqlPreferenceStore, SqlScheduleLookup


def build_auto_scheduler(db: Session) -> AutoScheduler:
    """Create an AutoScheduler bound to one session, in the configured timezone."""
    tz = settings.get_scheduler_timezone()
    return AutoScheduler(
        task_store=SqlTaskStore(db),
        preferences=SqlPreferenceStore(db),
        schedules=SqlScheduleLookup(db),
        calendar=GoogleCalendarReader(db, tz),
        tz=tz,
    )


def get_auto_scheduler(db: Session = Depends(get_db)) -> AutoScheduler:
    return build_auto_scheduler(db)
