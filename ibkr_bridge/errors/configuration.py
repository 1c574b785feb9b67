"""
Configuration error classifications.

Raised before any network call when credentials, the signal payload or
its required fields are missing or malformed.
"""

from typing import Optional

from .recovery import UnrecoverableError


class ConfigurationError(UnrecoverableError):
    """Missing or malformed credentials, settings or signal data."""

    def __init__(self, message: str, missing_fields: Optional[list] = None,
                 raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_fields = missing_fields or []
        self.raw_data = raw_data
