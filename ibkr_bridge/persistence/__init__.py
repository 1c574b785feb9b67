"""
Trade history persistence.
"""
from .records import FailedTrade, SuccessfulTrade, TradeRecord, TradeStatus
from .trade_log import DEFAULT_TRADE_LOG_FILE, LogResult, LogStatus, TradeLog

__all__ = [
    "DEFAULT_TRADE_LOG_FILE",
    "FailedTrade",
    "LogResult",
    "LogStatus",
    "SuccessfulTrade",
    "TradeLog",
    "TradeRecord",
    "TradeStatus",
]
