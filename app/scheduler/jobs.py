"""CHANLENS — Scheduler Jobs.

APScheduler daily job that scans every channel for a takeoff month at the
configured hour.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlmodel import Session

from app.config import settings
from app.database import engine
from app.analyzer.pipeline import compute_takeoff
from app.api.deps import metrics_cache
from app.core.errors import ChanlensError
from app.core.logging import get_logger
from app.store.sql_store import SQLSnapshotStore

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


def run_takeoff_scan(store) -> list[str]:
    """Return the IDs of every channel with a detected takeoff."""
    taken_off: list[str] = []
    for entity_id in store.list_entity_ids():
        try:
            result = compute_takeoff(entity_id, store)
        except ChanlensError as e:
            logger.error(f"Takeoff scan failed for {entity_id}: {e}", extra={"entity_id": entity_id})
            continue
        if result.has_taken_off:
            taken_off.append(entity_id)
    return taken_off


async def daily_takeoff_job() -> list[str]:
    """Scan all channels and refresh cached metrics."""
    logger.info("Scheduled takeoff scan starting...")
    taken_off: list[str] = []
    try:
        with Session(engine) as session:
            taken_off = run_takeoff_scan(SQLSnapshotStore(session))
        metrics_cache.clear()
        logger.info(f"Scheduled takeoff scan complete. {len(taken_off)} channels taken off")
    except Exception as e:
        logger.error(f"Scheduled takeoff scan failed: {e}")
    return taken_off


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        daily_takeoff_job,
        "cron",
        hour=settings.takeoff_scan_hour,
        minute=0,
        id="daily_takeoff_scan",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Daily takeoff scan at {settings.takeoff_scan_hour}:00 UTC")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
