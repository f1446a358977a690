"""nostrkit.core.time

Events carry whole seconds. Everything finer is dropped at the edge.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_SECOND = timedelta(seconds=1)


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_unix_seconds(dt: datetime) -> int:
    """Whole seconds since the epoch, flooring any sub-second part.

    Integer arithmetic on the timedelta; no float rounding.
    """

    return (ensure_utc(dt) - EPOCH) // _ONE_SECOND


def from_unix_seconds(seconds: int) -> datetime:
    try:
        return EPOCH + timedelta(seconds=int(seconds))
    except OverflowError as e:
        raise ValueError(f"unix time {seconds} is outside the representable range (years 1-9999)") from e
