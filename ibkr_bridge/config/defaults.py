"""Default configuration parameters for the IBKR signal bridge."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BrokerApiConfig:
    """Connection settings for the Client Portal gateway."""
    base_url: str = "https://localhost:5000/v1/portal"  # Local gateway root
    verify_tls: bool = False                             # Gateway ships a self-signed cert
    timeout_ms: int = 30000                              # Per-request timeout

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True)
class TradeLogConfig:
    """Trade history file settings."""
    path: str = "trade_history.json"
    indent: int = 2


@dataclass(frozen=True)
class OrderDefaults:
    """Fixed order attributes and fallbacks."""
    sec_type: str = "STK"          # Stock
    order_type: str = "MKT"        # Market order
    tif: str = "DAY"               # Time in force
    default_quantity: float = 1.0  # Used when the signal carries no usable size
    default_conid: int = 123456    # Placeholder until contracts are mapped


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    broker: BrokerApiConfig
    trade_log: TradeLogConfig
    order: OrderDefaults


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        broker=BrokerApiConfig(),
        trade_log=TradeLogConfig(),
        order=OrderDefaults(),
    )
