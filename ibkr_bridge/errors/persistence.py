"""
Trade history persistence errors.

Failures reading or writing the trade history file never escalate past
the trade logger; they degrade to a warning on the log result.
"""

from typing import Optional

from .recovery import GracefulDegradationError


class LoggingError(GracefulDegradationError):
    """Trade history file could not be read or written."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
