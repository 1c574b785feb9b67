"""Number formatting for JSON output."""

from typing import Union


def wire_number(value: float) -> Union[int, float]:
    """Whole numbers serialize as integers (``1`` rather than ``1.0``)."""
    return int(value) if float(value).is_integer() else value
