"""
Signal intake, models and symbol formatting.
"""
from .intake import (
    decode_payload,
    load_credentials,
    parse_signal,
    read_signal_payload,
    signal_from_data,
)
from .models import Action, Credentials, Signal
from .symbols import format_symbol, is_crypto_pair

__all__ = [
    "Action",
    "Credentials",
    "Signal",
    "decode_payload",
    "format_symbol",
    "is_crypto_pair",
    "load_credentials",
    "parse_signal",
    "read_signal_payload",
    "signal_from_data",
]
