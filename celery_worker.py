from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

# Celery configuration
celery_app = Celery(
    "attendance_api",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)

# Periodic maintenance sweeps (run with: celery -A celery_worker beat)
celery_app.conf.beat_schedule = {
    "complete-expired-classes": {
        "task": "app.tasks.complete_expired_classes_task",
        "schedule": crontab(hour=0, minute=5),
    },
    "cleanup-old-notifications": {
        "task": "app.tasks.cleanup_notifications_task",
        "schedule": crontab(hour=2, minute=0),
    },
    "dispatch-scheduled-reports": {
        "task": "app.tasks.dispatch_scheduled_reports_task",
        "schedule": crontab(minute=0),
    },
}
