import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.config import settings
from core.database import db
from core.recalculation import recalculate_all_habits
from core.time_utils import get_current_time

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

async def run_streak_recalculation():
    """Scheduled job: recompute streaks for every habit."""
    now = get_current_time()
    logger.info("Running streak recalculation at %s", now.isoformat())
    processed = await recalculate_all_habits(db, now=now)
    return processed

def start_scheduler():
    if not settings.SCHEDULER_ENABLED:
        logger.info("Streak scheduler disabled")
        return
    scheduler.add_job(
        run_streak_recalculation,
        IntervalTrigger(hours=settings.STREAK_RECALC_INTERVAL_HOURS),
        id="streak_recalculation",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Streak scheduler started (every %d h)", settings.STREAK_RECALC_INTERVAL_HOURS)

def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
