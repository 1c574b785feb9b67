"""JSON-array trade history file."""

import fcntl
import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from ..errors import LoggingError
from .records import TradeRecord

DEFAULT_TRADE_LOG_FILE = "trade_history.json"


class LogStatus(Enum):
    """Trade log write status."""
    LOGGED = "logged"
    LOGGED_WITH_WARNING = "logged_with_warning"
    NOT_LOGGED = "not_logged"


@dataclass
class LogResult:
    """Result of appending a record to the trade history."""
    status: LogStatus
    reason: Optional[str] = None
    record_count: int = 0

    @property
    def written(self) -> bool:
        return self.status != LogStatus.NOT_LOGGED


class TradeLog:
    """
    Append-only trade history stored as a single JSON array.

    Each append reads the whole file, adds the record and rewrites it. A
    missing file starts an empty history; an unparseable one is discarded
    and replaced, which loses the previous entries. Appends are serialised
    with an exclusive lock on ``<path>.lock`` and the rewrite goes through
    ``<path>.tmp``, so a failed write leaves the existing file untouched.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_TRADE_LOG_FILE, indent: int = 2):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.indent = indent
        self.logger = structlog.get_logger(__name__)

    def log(self, record: TradeRecord) -> LogResult:
        """Append ``record``. Never raises."""
        try:
            entry = record.to_dict()
            with self._locked():
                records, warning = self._read_records()
                records.append(entry)
                self._write_records(records)

        except LoggingError as e:
            self.logger.error(
                "Error logging trade",
                path=str(self.path),
                operation=e.operation,
                error=str(e)
            )
            return LogResult(status=LogStatus.NOT_LOGGED, reason=str(e))

        except Exception as e:
            self.logger.exception("Unexpected error logging trade", path=str(self.path))
            return LogResult(status=LogStatus.NOT_LOGGED, reason=f"Unexpected error: {e}")

        if warning:
            self.logger.warning(
                "Trade logged, previous history discarded",
                path=str(self.path),
                reason=warning
            )
            return LogResult(
                status=LogStatus.LOGGED_WITH_WARNING,
                reason=warning,
                record_count=len(records)
            )

        self.logger.info(
            "Trade logged successfully",
            path=str(self.path),
            status=entry["status"],
            record_count=len(records)
        )
        return LogResult(status=LogStatus.LOGGED, record_count=len(records))

    def read_all(self) -> list[dict[str, Any]]:
        """Current history; empty when the file is missing or unparseable."""
        records, _ = self._read_records()
        return records

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive lock on the sidecar lock file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a")
        except OSError as e:
            raise LoggingError(
                f"Cannot open lock file: {e}",
                operation="lock",
                target=str(self.lock_path)
            ) from e

        with lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read_records(self) -> tuple[list[dict[str, Any]], Optional[str]]:
        """Existing records plus a warning when they had to be discarded."""
        if not self.path.exists():
            return [], None

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise LoggingError(
                f"Cannot read trade history: {e}",
                operation="read",
                target=str(self.path)
            ) from e

        if not content.strip():
            return [], None

        try:
            existing = json.loads(content)
        except json.JSONDecodeError as e:
            return [], f"Error parsing trade history JSON: {e}"

        if not isinstance(existing, list):
            return [], f"Trade history is not a JSON array (got {type(existing).__name__})"

        return existing, None

    def _write_records(self, records: list[dict[str, Any]]) -> None:
        """Replace the history file; the previous file survives any failure."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            # Encode fully before touching the disk
            content = (json.dumps(records, indent=self.indent, ensure_ascii=False) + "\n").encode("utf-8")
            with open(tmp_path, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise LoggingError(
                f"Cannot write trade history: {e}",
                operation="write",
                target=str(self.path),
                degraded_functionality="trade_history",
                fallback_strategy="skip_record"
            ) from e
