"""
Celery configuration with the hourly ETA refresh on Beat
"""

from celery import Celery
from celery.schedules import crontab

from . import settings

celery_app = Celery(
    "autoschedule",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["autoschedule.celery_tasks.schedule"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    worker_hijack_root_logger=False,
)

# Beat schedule configuration
celery_app.conf.beat_schedule = {
    'refresh-all-etas': {
        'task': 'autoschedule.celery_tasks.schedule.refresh_all_etas',
        'schedule': crontab(minute=0),  # top of every hour
    },
}

if __name__ == "__main__":
    celery_app.start()
