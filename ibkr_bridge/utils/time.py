"""
Timestamp helpers for trade records.

Records carry wall-clock UTC time in ISO-8601 with millisecond precision
and a ``Z`` suffix.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def format_iso(ts: datetime) -> str:
    """
    Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are assumed to already be UTC.
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """ISO-8601 timestamp for ``now`` (defaults to the current time)."""
    return format_iso(now if now is not None else utc_now())
