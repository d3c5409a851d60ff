"""Expiry date arithmetic for events."""

from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from events.domain.value_objects import ExpiryDays

DEFAULT_EXPIRY_DAYS = 14


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compute_expiry(
    anchor: date | datetime | None,
    duration_days: int,
    *,
    tz: tzinfo = timezone.utc,
    clock: Callable[[], datetime] = utc_now,
) -> datetime:
    """Return the instant an event anchored at ``anchor`` expires.

    Days are added on the wall clock of ``tz``, so an expiry that crosses a
    daylight-saving change keeps its local time of day. A plain date anchors
    at local midnight; no anchor means "now" as reported by ``clock``.

    Raises:
        ValueError: If ``duration_days`` is not a positive integer.
    """
    days = ExpiryDays(duration_days)

    if anchor is None:
        start = clock().astimezone(tz)
    elif isinstance(anchor, datetime):
        start = anchor if anchor.tzinfo is not None else anchor.replace(tzinfo=tz)
    else:
        start = datetime.combine(anchor, time.min, tzinfo=tz)

    return start + timedelta(days=days.value)
