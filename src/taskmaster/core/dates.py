"""Calendar-day normalization shared by every date comparison in the core."""

from datetime import date, datetime, timedelta, timezone, tzinfo

UTC = timezone.utc


def to_day(value: date | datetime, tz: tzinfo = UTC) -> date:
    """
    Reduce a date or instant to its calendar day in the reference timezone.

    Naive datetimes are taken as UTC. Plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(tz).date()
    return value


def parse_instant(raw: str) -> datetime:
    """Parse an ISO 8601 timestamp (``Z`` suffix allowed) into an aware UTC datetime."""
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_day(raw: str, tz: tzinfo = UTC) -> date:
    """
    Parse a calendar day.

    ``YYYY-MM-DD`` is a day as-is; a full timestamp is reduced with ``to_day``.
    """
    text = raw.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return to_day(parse_instant(text), tz)


def iter_days(start: date, end: date):
    """Yield each day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def today_in(tz: tzinfo = UTC) -> date:
    """Current calendar day in the reference timezone."""
    return datetime.now(tz).date()
