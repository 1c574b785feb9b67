"""
Command-line entry point.

Reads credentials and the signal from the environment, places the order
and prints the result object as JSON on stdout. The exit code is always 0;
callers inspect ``success`` in the printed result.
"""

import argparse
import json
import os
import sys
from collections.abc import Mapping
from dataclasses import replace
from typing import Optional

import structlog

from .config.loader import ConfigLoader
from .errors import ConfigurationError
from .logging.config import configure_logging
from .persistence.records import UNKNOWN_FIELD, FailedTrade
from .persistence.trade_log import DEFAULT_TRADE_LOG_FILE, TradeLog
from .utils.time import utc_now_iso
from .workflow import OrderWorkflow, RunResult

LOG_LEVEL_ENV = "IBKR_BRIDGE_LOG_LEVEL"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
DEFAULT_LOG_LEVEL = 'INFO'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ibkr-bridge",
        description="Place an IBKR market order from a webhook trading signal"
    )
    parser.add_argument('--config', help="Path to a YAML configuration file")
    parser.add_argument('--trade-log', help="Trade history file (overrides configuration)")
    parser.add_argument(
        '--log-level',
        choices=LOG_LEVELS,
        help="Logging level (default: $IBKR_BRIDGE_LOG_LEVEL or INFO)"
    )
    parser.add_argument('--json-logs', action='store_true', help="Emit logs as JSON lines")
    return parser


def emit_result(result: RunResult) -> None:
    """Print the run result for the caller."""
    print(json.dumps(result.to_dict(), indent=2, default=str), file=sys.stdout, flush=True)


def main(argv: Optional[list[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Run one order and return the process exit code."""
    if environ is None:
        environ = os.environ

    args = build_parser().parse_args(argv)
    env_level = environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = args.log_level or (env_level if env_level in LOG_LEVELS else DEFAULT_LOG_LEVEL)
    configure_logging(level=level, format_json=args.json_logs)
    logger = structlog.get_logger("ibkr_bridge.cli")

    if not args.log_level and env_level and env_level not in LOG_LEVELS:
        logger.warning(
            "Unknown log level, using default",
            variable=LOG_LEVEL_ENV,
            value=environ[LOG_LEVEL_ENV],
            using=DEFAULT_LOG_LEVEL
        )

    try:
        settings = ConfigLoader.create(args.config).load(environ)
    except ConfigurationError as e:
        logger.error("Invalid bridge configuration", error=str(e))
        trade_log = TradeLog(args.trade_log or environ.get("TRADE_LOG_FILE") or DEFAULT_TRADE_LOG_FILE)
        log_result = trade_log.log(FailedTrade(
            timestamp=utc_now_iso(),
            symbol=UNKNOWN_FIELD,
            action=UNKNOWN_FIELD,
            error=str(e),
        ))
        emit_result(RunResult(success=False, error=str(e), log_result=log_result))
        return 0

    if args.trade_log:
        settings = replace(settings, trade_log=replace(settings.trade_log, path=args.trade_log))

    result = OrderWorkflow(settings).run(environ)
    emit_result(result)
    return 0
