"""
Configuration management for the IBKR signal bridge.
"""
from .defaults import BrokerApiConfig, OrderDefaults, TradeLogConfig, get_default_config
from .loader import BridgeSettings, ConfigLoader
from .validation import ConfigValidator, ValidationError

__all__ = [
    "BrokerApiConfig",
    "BridgeSettings",
    "ConfigLoader",
    "ConfigValidator",
    "OrderDefaults",
    "TradeLogConfig",
    "ValidationError",
    "get_default_config",
]
