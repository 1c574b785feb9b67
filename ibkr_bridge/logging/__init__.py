"""
Logging configuration and utilities for the IBKR signal bridge.
"""
from .config import configure_logging, get_broker_logger, get_logger

__all__ = ["configure_logging", "get_logger", "get_broker_logger"]
