"""Lenient timestamp parsing for filter bounds."""

import logging
from datetime import date, datetime, time, timezone

logger = logging.getLogger(__name__)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_bound(raw: str | None, end_of_day: bool = False) -> datetime | None:
    """
    Parse a date range bound.

    Accepts ISO 8601 dates (``2024-01-31``) and datetimes
    (``2024-01-31T12:00:00Z``). A date-only value resolves to the start of
    the day, or to its last microsecond when ``end_of_day`` is set.

    Args:
        raw: Raw bound string from the filter configuration
        end_of_day: Whether a date-only value should cover the whole day

    Returns:
        Timezone-aware UTC datetime, or None when the bound is unset or
        cannot be parsed
    """
    if raw is None:
        return None

    text = raw.strip()
    if not text:
        return None

    if len(text) == 10:
        try:
            day = date.fromisoformat(text)
        except ValueError:
            logger.debug(f"Ignoring malformed date bound: {raw!r}")
            return None
        moment = time.max if end_of_day else time.min
        return datetime.combine(day, moment, tzinfo=timezone.utc)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring malformed date bound: {raw!r}")
        return None
    return ensure_utc(parsed)
