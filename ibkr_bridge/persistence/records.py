"""
Trade history records.

A record is either a SuccessfulTrade or a FailedTrade; both share the
attempt metadata. The dictionary form is the on-disk format.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional

from ..utils.numbers import wire_number

UNKNOWN_FIELD = "UNKNOWN"


class TradeStatus(Enum):
    """Outcome of an order attempt."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class TradeRecord(ABC):
    """Common fields of every trade history entry."""
    timestamp: str                      # ISO-8601 UTC
    symbol: str
    action: str
    order_size: Optional[float] = None  # Unknown when the signal never parsed

    status: ClassVar[TradeStatus]

    def to_dict(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "timestamp": self.timestamp,
            "symbol": self.symbol,
            "action": self.action,
        }
        if self.order_size is not None:
            record["orderSize"] = wire_number(self.order_size)
        record["status"] = self.status.value
        record.update(self._outcome_fields())
        return record

    @abstractmethod
    def _outcome_fields(self) -> dict[str, Any]:
        """Fields specific to the outcome."""
        pass


@dataclass(frozen=True)
class SuccessfulTrade(TradeRecord):
    """Order accepted by the broker."""
    order_id: str = "unknown"

    status: ClassVar[TradeStatus] = TradeStatus.SUCCESS

    def _outcome_fields(self) -> dict[str, Any]:
        return {"orderId": self.order_id}


@dataclass(frozen=True)
class FailedTrade(TradeRecord):
    """Run aborted before or during order submission."""
    error: str = ""

    status: ClassVar[TradeStatus] = TradeStatus.FAILED

    def _outcome_fields(self) -> dict[str, Any]:
        return {"error": self.error}
