"""Symbol to contract identifier (conid) resolution."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional

import structlog

from ..signals.symbols import format_symbol

logger = structlog.get_logger(__name__)

PLACEHOLDER_CONID = 123456


class ContractResolver(ABC):
    """Maps a formatted symbol to the broker's numeric contract id."""

    @abstractmethod
    def resolve(self, symbol: str) -> int:
        """Return the conid for a formatted symbol."""
        pass


class StaticContractResolver(ContractResolver):
    """
    Resolver backed by a fixed symbol table.

    Symbols missing from the table resolve to ``default_conid``; with an
    empty table every symbol maps to the placeholder id.
    """

    def __init__(self, mapping: Optional[Mapping[str, int]] = None,
                 default_conid: int = PLACEHOLDER_CONID):
        self.mapping = {format_symbol(symbol): int(conid) for symbol, conid in (mapping or {}).items()}
        self.default_conid = default_conid

    def resolve(self, symbol: str) -> int:
        conid = self.mapping.get(format_symbol(symbol))
        if conid is None:
            logger.warning(
                "No contract mapping for symbol, using default conid",
                symbol=symbol,
                conid=self.default_conid
            )
            return self.default_conid
        return conid
