"""
Recovery strategy classifications for error handling.

These mixins categorize errors by how the order workflow reacts to them:
unrecoverable errors abort the run, degradation errors are reported and
absorbed locally.
"""

from typing import Optional, Dict, Any


class UnrecoverableError(Exception):
    """Mixin for errors that abort the current run."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class GracefulDegradationError(Exception):
    """Mixin for errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True
