"""
Archive Tasks — daily sweep moving inactive closed remarks to the archive.
"""
import logging
import time

from celery import shared_task

from app.db import SessionLocal
from app.metrics import observe_job

logger = logging.getLogger(__name__)


@shared_task
def auto_archive_remarks() -> dict:
    """Archive completed/rejected remarks untouched for the archival threshold.

    A store failure propagates and is not retried; the next beat sweeps again.
    """
    logger.info("Running scheduled remark archival")
    start = time.perf_counter()
    status = "error"
    try:
        with SessionLocal() as db:
            from app.services.remark_lifecycle import RemarkLifecycleService

            svc = RemarkLifecycleService(db)
            count = svc.auto_archive_sweep(trigger="scheduled")
            db.commit()
        status = "success"
    finally:
        observe_job("auto_archive_remarks", status, time.perf_counter() - start)

    if count:
        logger.info("Archived %d remarks", count)
    return {"archived": count}
