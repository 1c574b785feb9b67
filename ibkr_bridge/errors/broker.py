"""
Broker API error classifications.

These exceptions represent rejections or failures of the Client Portal API.
Each call is attempted once, so any of them ends the run.
"""

from typing import Optional, Any

from .recovery import UnrecoverableError


class BrokerError(UnrecoverableError):
    """Base class for failures talking to the broker API."""

    def __init__(self, message: str, step: Optional[str] = None,
                 status_code: Optional[int] = None,
                 response_body: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.step = step
        self.status_code = status_code
        self.response_body = response_body


class AuthenticationError(BrokerError):
    """The broker rejected the credentials or returned an unusable token."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("step", "authenticate")
        super().__init__(message, **kwargs)


class ApiError(BrokerError):
    """Non-success response from a session, account or order endpoint."""
    pass
