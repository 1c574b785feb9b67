"""
Signal intake from the process environment.

Reads the Client Portal credentials and the webhook payload, and turns the
payload into a validated Signal. Every failure raises ConfigurationError
before any network call is made.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

import orjson
import structlog

from ..errors import ConfigurationError
from .models import Action, Credentials, Signal

logger = structlog.get_logger(__name__)

USERNAME_ENV = "IBKR_USERNAME"
PASSWORD_ENV = "IBKR_PASSWORD"
ACCOUNT_ID_ENV = "IBKR_ACCOUNT_ID"
SIGNAL_ENV = "SIGNAL_DATA"

DEFAULT_ORDER_SIZE = 1.0


def load_credentials(environ: Mapping[str, str]) -> Credentials:
    """Read credentials, failing when any of them is missing."""
    values = {
        "username": environ.get(USERNAME_ENV),
        "password": environ.get(PASSWORD_ENV),
        "account_id": environ.get(ACCOUNT_ID_ENV),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            "IBKR credentials not provided",
            missing_fields=missing
        )
    return Credentials(**values)


def read_signal_payload(environ: Mapping[str, str]) -> Optional[str]:
    """Raw signal payload, or None when the variable is unset."""
    return environ.get(SIGNAL_ENV)


def decode_payload(payload: Optional[str]) -> dict[str, Any]:
    """
    Decode a raw payload into a JSON object.

    Raises:
        ConfigurationError: If the payload is absent, not JSON or not an object
    """
    if payload is None or not payload.strip():
        raise ConfigurationError("No signal data provided")

    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid signal JSON: {e}",
            raw_data=payload[:200]
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Signal data must be a JSON object",
            raw_data=payload[:200]
        )
    return data


def parse_order_size(value: Any, default: float = DEFAULT_ORDER_SIZE) -> float:
    """Numeric order size, or the default when absent or unusable."""
    if value is None or isinstance(value, bool) or value == "":
        return default
    try:
        size = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(size):
        return default
    return size


def parse_action(value: str) -> Action:
    """Map an action string to an Action; anything but "buy" sells."""
    normalized = value.strip().lower()
    if normalized == Action.BUY.value:
        return Action.BUY
    if normalized != Action.SELL.value:
        logger.warning("Unrecognized action, treating as sell", action=value)
    return Action.SELL


def parse_signal(payload: Optional[str], default_order_size: float = DEFAULT_ORDER_SIZE) -> Signal:
    """
    Parse and validate a webhook signal payload.

    Args:
        payload: JSON text with ``symbol`` (or ``ticker``), ``action`` and
            optional ``order_size``
        default_order_size: Quantity used when ``order_size`` is unusable

    Returns:
        Validated Signal

    Raises:
        ConfigurationError: If the payload or a required field is missing
    """
    return signal_from_data(decode_payload(payload), default_order_size)


def signal_from_data(data: dict[str, Any], default_order_size: float = DEFAULT_ORDER_SIZE) -> Signal:
    """Validate a decoded payload into a Signal."""
    symbol = data.get("symbol") or data.get("ticker")
    if not symbol:
        raise ConfigurationError(
            "No symbol provided in signal",
            missing_fields=["symbol"]
        )
    if not isinstance(symbol, str):
        raise ConfigurationError(f"Symbol must be a string, got {type(symbol).__name__}")

    action = data.get("action")
    if not action:
        raise ConfigurationError(
            "No action (buy/sell) provided in signal",
            missing_fields=["action"]
        )
    if not isinstance(action, str):
        raise ConfigurationError(f"Action must be a string, got {type(action).__name__}")

    return Signal(
        symbol=symbol,
        action=parse_action(action),
        order_size=parse_order_size(data.get("order_size"), default_order_size),
        raw=data,
    )
