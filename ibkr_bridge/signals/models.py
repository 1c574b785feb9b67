"""
Typed models for incoming trading signals.

Signals are validated once at intake; everything downstream can rely on
these fields being present and well-formed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Action(Enum):
    """Order direction requested by a signal."""
    BUY = "buy"
    SELL = "sell"

    @property
    def side(self) -> str:
        """Broker order side."""
        return self.name


@dataclass(frozen=True)
class Credentials:
    """Client Portal login and target account."""
    username: str
    password: str = field(repr=False)
    account_id: str


@dataclass(frozen=True)
class Signal:
    """Validated trading instruction."""
    symbol: str                 # As received, before formatting
    action: Action
    order_size: float           # Already defaulted when absent or unusable
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
