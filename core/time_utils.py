from datetime import date, datetime
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")

def get_current_time():
    """Returns the current time in UTC."""
    return datetime.now(UTC)

def to_utc(dt: datetime):
    """Converts a datetime object to UTC."""
    if dt.tzinfo is None:
        # Naive datetimes from the DB are already UTC
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)

def parse_timestamp(value):
    """
    Coerces a stored timestamp into an aware UTC datetime.

    Accepts datetimes (naive treated as UTC), dates (midnight UTC) and
    ISO-8601 strings. Returns None for anything else.
    """
    try:
        if isinstance(value, datetime):
            return to_utc(value)
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=UTC)
        if isinstance(value, str):
            return to_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    except (ValueError, OverflowError):
        # Unparseable, or pushed out of the representable range by its offset
        return None
    return None
