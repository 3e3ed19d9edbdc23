"""APScheduler integration - background job scheduler for the periodic warehouse sync."""
import asyncio
from typing import Optional
import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings

logger = structlog.get_logger()
_scheduler: Optional[BackgroundScheduler] = None


def get_scheduler() -> Optional[BackgroundScheduler]:
    return _scheduler


def init_scheduler(interval_minutes: Optional[int] = None) -> Optional[BackgroundScheduler]:
    """Start the account sync job. An interval of 0 leaves the scheduler off."""
    global _scheduler
    interval_minutes = settings.SYNC_INTERVAL_MINUTES if interval_minutes is None else interval_minutes
    if interval_minutes <= 0:
        logger.info("Account sync scheduler disabled")
        return None

    _scheduler = BackgroundScheduler(timezone="UTC")
    _scheduler.add_job(
        job_account_sync,
        IntervalTrigger(minutes=interval_minutes),
        id="account_sync",
        name="Warehouse Account Sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    logger.info("Account sync scheduler started", interval_minutes=interval_minutes,
                jobs=len(_scheduler.get_jobs()))
    return _scheduler


def shutdown_scheduler():
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("Account sync scheduler stopped")
        _scheduler = None


def job_account_sync():
    """Run one batch sync on the scheduler thread with its own session and loop."""
    from app.db.base import session_scope
    from app.services.adapters.warehouse import get_warehouse_adapter
    from app.services.pipelines.account_sync import run_account_sync_pipeline

    logger.info("Running scheduled account sync")
    try:
        with session_scope() as db:
            result = asyncio.run(run_account_sync_pipeline(
                db,
                get_warehouse_adapter(),
                triggered_by="scheduler",
            ))
        logger.info("Scheduled account sync complete", run_id=result["run_id"], counters=result["counters"])
    except Exception as e:
        logger.error("Scheduled account sync failed", error=str(e))
