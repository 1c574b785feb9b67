"""Request and response models for the Client Portal API."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..config.defaults import OrderDefaults
from ..signals.models import Signal
from ..utils.numbers import wire_number

UNKNOWN_ORDER_ID = "unknown"


@dataclass(frozen=True)
class SessionToken:
    """Result of a successful login."""
    access_token: Optional[str] = field(default=None, repr=False)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> "SessionToken":
        token = payload.get("access_token") or payload.get("token")
        return cls(access_token=token if isinstance(token, str) else None, raw=payload)


@dataclass(frozen=True)
class SessionStatus:
    """Session liveness as reported by the tickle endpoint."""
    authenticated: Optional[bool] = None
    connected: Optional[bool] = None
    raw: Any = None

    @classmethod
    def from_response(cls, payload: Any) -> "SessionStatus":
        if not isinstance(payload, dict):
            return cls(raw=payload)
        iserver = payload.get("iserver")
        auth_status = iserver.get("authStatus") if isinstance(iserver, dict) else None
        if not isinstance(auth_status, dict):
            auth_status = {}
        return cls(
            authenticated=auth_status.get("authenticated"),
            connected=auth_status.get("connected"),
            raw=payload,
        )


@dataclass(frozen=True)
class OrderRequest:
    """Market order ready for submission."""
    account_id: str
    conid: int
    side: str                   # BUY or SELL
    quantity: float
    sec_type: str = "STK"
    order_type: str = "MKT"
    tif: str = "DAY"

    @classmethod
    def from_signal(cls, signal: Signal, account_id: str, conid: int,
                    defaults: Optional[OrderDefaults] = None) -> "OrderRequest":
        """Derive the order for a validated signal."""
        defaults = defaults or OrderDefaults()
        return cls(
            account_id=account_id,
            conid=conid,
            side=signal.action.side,
            quantity=signal.order_size,
            sec_type=defaults.sec_type,
            order_type=defaults.order_type,
            tif=defaults.tif,
        )

    def to_payload(self) -> dict[str, Any]:
        """Request body for the order endpoint."""
        return {
            "acctId": self.account_id,
            "conid": self.conid,
            "secType": self.sec_type,
            "orderType": self.order_type,
            "side": self.side,
            "quantity": wire_number(self.quantity),
            "tif": self.tif,
        }


@dataclass(frozen=True)
class OrderResult:
    """Broker acknowledgement of a submitted order."""
    id: str
    raw_response: Any = None

    @classmethod
    def from_response(cls, payload: Any) -> "OrderResult":
        # The gateway answers with either an object or a one-element list
        candidate = payload[0] if isinstance(payload, list) and payload else payload
        order_id = None
        if isinstance(candidate, dict):
            order_id = candidate.get("id") or candidate.get("order_id")
        return cls(
            id=str(order_id) if order_id is not None else UNKNOWN_ORDER_ID,
            raw_response=payload,
        )
