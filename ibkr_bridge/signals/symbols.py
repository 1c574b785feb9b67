"""Symbol normalization for the Client Portal API."""

import re

_STRIP_PATTERN = re.compile(r"[/\s]")

# Quote currencies marking a crypto pair
CRYPTO_QUOTE_SUFFIXES = ("USD", "USDT")


def format_symbol(symbol: str) -> str:
    """
    Normalize a ticker into the broker's form.

    Strips slashes and whitespace and upper-cases the rest, so
    ``"btc/usdt"`` becomes ``"BTCUSDT"``. Idempotent.
    """
    return _STRIP_PATTERN.sub("", symbol).upper()


def is_crypto_pair(symbol: str) -> bool:
    """True when a formatted symbol looks like a crypto pair."""
    return symbol.endswith(CRYPTO_QUOTE_SUFFIXES)
