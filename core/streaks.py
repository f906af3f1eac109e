import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from core.time_utils import parse_timestamp, to_utc
from models.streak import StreakStats

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

def _key_of(instant: datetime) -> str:
    # isoformat always zero-pads the year, unlike strftime("%Y")
    return to_utc(instant).date().isoformat()

def to_date_key(value) -> Optional[str]:
    """
    Returns the UTC calendar day (YYYY-MM-DD) of a timestamp.

    Returns None when the value is missing or cannot be read as a timestamp.
    """
    instant = parse_timestamp(value)
    if instant is None:
        return None
    return _key_of(instant)

def _key_to_ms(date_key: str) -> int:
    # Midnight of the day, in ms since 0001-01-01
    return (date.fromisoformat(date_key).toordinal() - 1) * DAY_MS

def day_gap(newer_key: str, older_key: str) -> int:
    """Whole days between two date keys (positive when newer_key is later)."""
    return round((_key_to_ms(newer_key) - _key_to_ms(older_key)) / DAY_MS)

def parse_entry_timestamps(timestamps: Iterable) -> List[datetime]:
    """Reads raw performed_at values as UTC instants, skipping unreadable ones."""
    instants = []
    for value in timestamps:
        instant = parse_timestamp(value)
        if instant is None:
            logger.debug("Skipping entry with unreadable timestamp: %r", value)
            continue
        instants.append(instant)
    return instants

def distinct_date_keys(instants: Iterable[datetime]) -> List[str]:
    """
    Normalizes parsed entry instants into distinct day keys, newest first.

    Entries on the same UTC day as the previous one (in descending order)
    collapse into a single key.
    """
    keys: List[str] = []
    for instant in sorted(instants, reverse=True):
        key = _key_of(instant)
        if keys and keys[-1] == key:
            continue
        keys.append(key)
    return keys

def compute_current_streak(date_keys: List[str], now: datetime) -> int:
    """
    Calculates the trailing streak from distinct day keys sorted newest first.

    The newest key must be today or yesterday (relative to `now`) for the
    streak to be alive. From there, each key exactly one day older extends
    the streak; the first larger gap ends the scan.

    Args:
        date_keys (list): Distinct date keys, newest first.
        now (datetime): The instant the calculation runs at.

    Returns:
        int: Current streak length.
    """
    if not date_keys:
        return 0

    today_key = _key_of(now)
    if day_gap(today_key, date_keys[0]) > 1:
        return 0

    streak = 1
    previous = date_keys[0]
    for key in date_keys[1:]:
        gap = day_gap(previous, key)
        if gap == 0:
            continue
        if gap == 1:
            streak += 1
            previous = key
            continue
        break
    return streak

def compute_longest_streak(date_keys: List[str]) -> int:
    """
    Calculates the longest run of consecutive days anywhere in the keys.

    Args:
        date_keys (list): Distinct date keys, newest first.

    Returns:
        int: Longest streak length (0 when there are no keys).
    """
    longest = 0
    run = 0
    previous = None

    for key in date_keys:
        if previous is None:
            run = 1
            longest = max(longest, run)
            previous = key
            continue

        gap = day_gap(previous, key)
        if gap == 0:
            continue

        if gap == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = key

    return longest

def calculate_streaks(timestamps: Iterable, now: datetime, previous_longest: int = 0) -> StreakStats:
    """
    Derives the streak fields of one habit from its recent entry timestamps.

    The stored longest streak only ever grows: the result is the max of
    `previous_longest` and the longest run found in `timestamps`, so a streak
    older than the scanned window is never forgotten.

    Args:
        timestamps (iterable): performed_at values of the habit's entries.
        now (datetime): The instant the calculation runs at.
        previous_longest (int): The habit's currently stored longest streak.

    Returns:
        StreakStats: current_streak, longest_streak and last_entry_at.
    """
    instants = parse_entry_timestamps(timestamps)
    date_keys = distinct_date_keys(instants)

    current = compute_current_streak(date_keys, now)
    candidate = compute_longest_streak(date_keys)

    return StreakStats(
        current_streak=current,
        longest_streak=max(max(previous_longest, 0), candidate),
        last_entry_at=max(instants) if instants else None,
    )
