"""Pytest configuration and shared fixtures."""

import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import patch
from urllib.error import HTTPError, URLError

import orjson
import pytest
import structlog

from ibkr_bridge.config.defaults import BrokerApiConfig
from ibkr_bridge.config.loader import BridgeSettings, ConfigLoader


class FakeResponse:
    """Minimal stand-in for the object urlopen returns."""

    def __init__(self, raw: bytes, status: int = 200):
        self._raw = raw
        self.status = status

    def getcode(self) -> int:
        return self.status

    def read(self) -> bytes:
        return self._raw

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        return False


class FakeGateway:
    """Routes urlopen calls to canned Client Portal responses."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.requests: List[Dict[str, Any]] = []
        self.routes: Dict[str, Any] = {
            "/oauth/token": ({"access_token": "tok-123", "token_type": "bearer"}, 200),
            "/tickle": ({
                "session": "a1b2c3",
                "iserver": {"authStatus": {"authenticated": True, "connected": True}},
            }, 200),
            "/account": ({"set": True, "acctId": "DU1234567"}, 200),
            "/order": ([{"order_id": "987654", "order_status": "Submitted"}], 200),
        }

    def route(self, path: str, body: Any = None, status: int = 200,
              error: Optional[Exception] = None) -> None:
        self.routes[path] = error if error is not None else (body, status)

    @property
    def paths(self) -> List[str]:
        return [request["path"] for request in self.requests]

    def body_for(self, path: str) -> Any:
        for request in self.requests:
            if request["path"] == path:
                return request["body"]
        return None

    def __call__(self, req, timeout=None, context=None):
        path = req.full_url[len(self.base_url):]
        self.requests.append({
            "path": path,
            "method": req.get_method(),
            "body": orjson.loads(req.data) if req.data else None,
            "authorization": req.get_header("Authorization"),
            "timeout": timeout,
            "context": context,
        })

        route = self.routes.get(path)
        if route is None:
            raise URLError("connection refused")
        if isinstance(route, Exception):
            raise route

        body, status = route
        raw = body if isinstance(body, bytes) else orjson.dumps(body)
        if status >= 400:
            raise HTTPError(req.full_url, status, "Bad Request", None, io.BytesIO(raw))
        return FakeResponse(raw, status)


@pytest.fixture
def gateway():
    """Fake gateway answering every call successfully unless re-routed."""
    fake = FakeGateway(BrokerApiConfig().base_url)
    with patch("ibkr_bridge.broker.client.urlopen", side_effect=fake):
        yield fake


@pytest.fixture
def trade_log_path(tmp_path: Path) -> Path:
    return tmp_path / "trade_history.json"


@pytest.fixture
def settings(trade_log_path: Path) -> BridgeSettings:
    return ConfigLoader.create().load({"TRADE_LOG_FILE": str(trade_log_path)})


@pytest.fixture
def credentials_env() -> Dict[str, str]:
    return {
        "IBKR_USERNAME": "trader",
        "IBKR_PASSWORD": "s3cret",
        "IBKR_ACCOUNT_ID": "DU1234567",
    }


@pytest.fixture
def sample_trade_record() -> Dict[str, Any]:
    """A trade history entry as written by a previous run."""
    return {
        "timestamp": "2024-03-01T14:30:00.000Z",
        "symbol": "MSFT",
        "action": "sell",
        "orderSize": 3,
        "status": "success",
        "orderId": "111222",
    }


@pytest.fixture
def restore_logging():
    """Undo configure_logging() so later tests keep pytest's handlers."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
