from celery.schedules import crontab

from app.config import settings

AUTO_ARCHIVE_TASK = "app.tasks.archive.auto_archive_remarks"


def get_celery_config() -> dict:
    return {
        "broker_url": settings.celery_broker_url,
        "result_backend": settings.celery_result_backend,
        "task_serializer": "json",
        "result_serializer": "json",
        "accept_content": ["json"],
        "timezone": "UTC",
        "enable_utc": True,
        "task_always_eager": settings.testing,
    }


def build_beat_schedule() -> dict:
    return {
        "auto-archive-remarks": {
            "task": AUTO_ARCHIVE_TASK,
            "schedule": crontab(hour=settings.auto_archive_hour, minute=settings.auto_archive_minute),
        },
    }
