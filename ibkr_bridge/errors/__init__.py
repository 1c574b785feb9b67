"""
Error classification for the order workflow.

Structured exception hierarchy for configuration problems, broker API
failures and trade history persistence issues.
"""

from .broker import (
    BrokerError,
    AuthenticationError,
    ApiError,
)
from .configuration import ConfigurationError
from .persistence import LoggingError
from .recovery import (
    UnrecoverableError,
    GracefulDegradationError,
)

__all__ = [
    # Configuration
    "ConfigurationError",
    # Broker
    "BrokerError",
    "AuthenticationError",
    "ApiError",
    # Persistence
    "LoggingError",
    # Recovery Categories
    "UnrecoverableError",
    "GracefulDegradationError",
]
