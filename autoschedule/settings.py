"""
Environment configuration for the auto-scheduling service.
Values are read once at import time from the process environment or a .env file.
"""

import os

import pytz
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./autoschedule.db")

# All scheduling happens in the wall-clock time of this zone
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "UTC")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_scheduler_timezone():
    """Resolve SCHEDULER_TIMEZONE, falling back to UTC for unknown names."""
    try:
        return pytz.timezone(SCHEDULER_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC
