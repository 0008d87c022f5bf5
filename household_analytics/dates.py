"""Calendar policy for the engine.

All month bucketing happens on UTC calendar months. Aware datetimes are
converted to UTC first; naive datetimes and plain ``YYYY-MM-DD`` strings
are taken to already be UTC.
"""
import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional

UTC = timezone.utc


def today_utc() -> date:
    return datetime.now(tz=UTC).date()


def parse_date(value: Any) -> Optional[date]:
    """Return the UTC calendar date for ``value`` or None when it can't be read."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d", "%Y/%m/%d"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    return d.strftime("%b %Y")


def add_months(d: date, n: int) -> date:
    index = d.year * 12 + (d.month - 1) + n
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def previous_month(d: date) -> date:
    return add_months(d.replace(day=1), -1)


def calendar_month_diff(start: date, end: date) -> int:
    """Difference in calendar months, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def months_between(start: date, end: date) -> int:
    """Whole months from ``start`` to ``end``; negative when end precedes start.

    A month only counts once its day-of-month has been reached, with the
    start day clamped to the length of shorter months.
    """
    diff = calendar_month_diff(start, end)
    if diff > 0:
        anniversary = add_months(start, diff)
        if end < anniversary:
            diff -= 1
    elif diff < 0:
        anniversary = add_months(start, diff)
        if end > anniversary:
            diff += 1
    return diff
