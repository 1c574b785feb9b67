"""
Utility functions module.

Shared helpers for timestamps and number formatting.

Time Semantics:
- Trade records use wall-clock UTC time, there is no market clock here
- Timestamps are ISO-8601 with millisecond precision and a ``Z`` suffix
"""
from .numbers import wire_number
from .time import format_iso, utc_now, utc_now_iso

__all__ = ["format_iso", "utc_now", "utc_now_iso", "wire_number"]
