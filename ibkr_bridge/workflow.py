"""
Order workflow coordinator.

Runs one signal through the pipeline:
Signal Intake → Symbol Formatting → Contract Resolution → Broker Session → Trade Log

Every run ends with exactly one trade history record, whatever the outcome.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import structlog

from .broker.client import BrokerSessionClient
from .broker.models import OrderRequest, OrderResult
from .config.loader import BridgeSettings
from .contracts.resolver import ContractResolver, StaticContractResolver
from .errors import BrokerError, UnrecoverableError
from .persistence.records import UNKNOWN_FIELD, FailedTrade, SuccessfulTrade, TradeRecord
from .persistence.trade_log import LogResult, TradeLog
from .signals.intake import decode_payload, load_credentials, read_signal_payload, signal_from_data
from .signals.models import Signal
from .signals.symbols import format_symbol, is_crypto_pair
from .utils.time import utc_now, utc_now_iso

logger = structlog.get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of a single order run."""
    success: bool
    order: Any = None
    error: Optional[str] = None
    log_result: Optional[LogResult] = None

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "order": self.order}
        return {"success": False, "error": self.error}


@dataclass
class _Attempt:
    """What is known about the current run when it fails."""
    raw_signal: dict[str, Any] = field(default_factory=dict)
    signal: Optional[Signal] = None
    symbol: Optional[str] = None


class OrderWorkflow:
    """
    Coordinates a single signal-to-order run.

    The broker client, contract resolver and trade log default to ones
    built from ``settings`` and can be replaced for testing or to plug in
    a real contract lookup.
    """

    def __init__(
        self,
        settings: BridgeSettings,
        client: Optional[BrokerSessionClient] = None,
        resolver: Optional[ContractResolver] = None,
        trade_log: Optional[TradeLog] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings
        self.client = client or BrokerSessionClient(settings.broker)
        self.resolver = resolver or StaticContractResolver(
            settings.contracts,
            default_conid=settings.order.default_conid
        )
        self.trade_log = trade_log or TradeLog(settings.trade_log.path, indent=settings.trade_log.indent)
        self.clock = clock
        self.logger = logger

    def run(self, environ: Optional[Mapping[str, str]] = None) -> RunResult:
        """Execute one run; never raises."""
        if environ is None:
            environ = os.environ

        attempt = _Attempt()

        try:
            signal, symbol, order_result = self._execute(environ, attempt)

        except UnrecoverableError as e:
            self._report_failure(e)
            return self._fail(attempt, str(e))

        except Exception as e:
            self.logger.exception("Unexpected error in order process")
            return self._fail(attempt, str(e))

        record = SuccessfulTrade(
            timestamp=utc_now_iso(self.clock()),
            symbol=symbol,
            action=signal.action.value,
            order_size=signal.order_size,
            order_id=order_result.id,
        )
        log_result = self.trade_log.log(record)

        self.logger.info("Order process completed", success=True, order_id=order_result.id)
        return RunResult(success=True, order=order_result.raw_response, log_result=log_result)

    def _execute(
        self, environ: Mapping[str, str], attempt: _Attempt
    ) -> tuple[Signal, str, OrderResult]:
        credentials = load_credentials(environ)

        attempt.raw_signal = decode_payload(read_signal_payload(environ))
        self.logger.info("Processing signal", signal=attempt.raw_signal)

        signal = signal_from_data(attempt.raw_signal, self.settings.order.default_quantity)
        symbol = format_symbol(signal.symbol)
        attempt.signal = signal
        attempt.symbol = symbol

        conid = self.resolver.resolve(symbol)
        order = OrderRequest.from_signal(signal, credentials.account_id, conid, self.settings.order)

        self.logger.info(
            "Preparing order",
            side=order.side,
            quantity=order.quantity,
            symbol=symbol,
            conid=conid,
            asset_class="crypto" if is_crypto_pair(symbol) else "stock"
        )

        self.client.authenticate(credentials.username, credentials.password)
        self.client.check_session()
        self.client.select_account(credentials.account_id)
        order_result = self.client.submit_order(order)

        return signal, symbol, order_result

    def _report_failure(self, error: UnrecoverableError) -> None:
        if isinstance(error, BrokerError):
            self.logger.error(
                "IBKR API error",
                error=str(error),
                error_type=type(error).__name__,
                step=error.step,
                status_code=error.status_code,
                response=error.response_body
            )
        else:
            self.logger.error(
                "Error in order process",
                error=str(error),
                error_type=type(error).__name__
            )

    def _fail(self, attempt: _Attempt, message: str) -> RunResult:
        log_result = self.trade_log.log(self._failure_record(attempt, message))
        return RunResult(success=False, error=message, log_result=log_result)

    def _failure_record(self, attempt: _Attempt, message: str) -> TradeRecord:
        timestamp = utc_now_iso(self.clock())

        if attempt.signal is not None and attempt.symbol is not None:
            return FailedTrade(
                timestamp=timestamp,
                symbol=attempt.symbol,
                action=attempt.signal.action.value,
                order_size=attempt.signal.order_size,
                error=message,
            )

        # Signal never validated; keep whatever the payload carried
        raw_symbol = attempt.raw_signal.get("symbol") or attempt.raw_signal.get("ticker")
        raw_action = attempt.raw_signal.get("action")
        return FailedTrade(
            timestamp=timestamp,
            symbol=raw_symbol if isinstance(raw_symbol, str) and raw_symbol else UNKNOWN_FIELD,
            action=raw_action if isinstance(raw_action, str) and raw_action else UNKNOWN_FIELD,
            error=message,
        )
