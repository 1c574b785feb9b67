"""
Client Portal API access.
"""
from .client import BrokerSessionClient
from .models import OrderRequest, OrderResult, SessionStatus, SessionToken

__all__ = [
    "BrokerSessionClient",
    "OrderRequest",
    "OrderResult",
    "SessionStatus",
    "SessionToken",
]
