import logging

from core.config import settings
from core.streaks import calculate_streaks
from core.time_utils import get_current_time
from models.streak import StreakStats

logger = logging.getLogger(__name__)

def _stored_longest(habit_doc) -> int:
    try:
        return max(int(habit_doc.get("longest_streak") or 0), 0)
    except (TypeError, ValueError):
        return 0

async def recalculate_habit(database, habit_doc, now=None) -> StreakStats:
    """
    Recomputes and persists the streak fields of a single habit.

    Reads the newest STREAK_SCAN_LIMIT entries, runs the streak calculator
    against the habit's stored longest streak and $sets the result.
    """
    now = now or get_current_time()
    habit_id = str(habit_doc["_id"])

    entries = await database.entries.find(
        {"habit_id": habit_id}
    ).sort("performed_at", -1).limit(settings.STREAK_SCAN_LIMIT).to_list(settings.STREAK_SCAN_LIMIT)

    stats = calculate_streaks(
        (entry.get("performed_at") for entry in entries),
        now=now,
        previous_longest=_stored_longest(habit_doc),
    )

    await database.habits.update_one(
        {"_id": habit_doc["_id"]},
        {"$set": {
            "current_streak": stats.current_streak,
            "longest_streak": stats.longest_streak,
            "last_entry_at": stats.last_entry_at,
            "updated_at": now
        }}
    )
    return stats

async def recalculate_all_habits(database, now=None) -> int:
    """
    Recomputes streaks for every habit. Returns the number of habits processed.

    All habits in one run share the same "now". A habit that fails is logged
    and skipped; it does not stop the run.
    """
    now = now or get_current_time()
    processed = 0

    habits_cursor = database.habits.find({})
    async for habit_doc in habits_cursor:
        try:
            await recalculate_habit(database, habit_doc, now=now)
        except Exception:
            logger.exception("Streak calculation failed for habit %s", habit_doc.get("_id"))
            continue
        processed += 1

    logger.info("Streak calculation complete (processed=%d)", processed)
    return processed
