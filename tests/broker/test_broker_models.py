"""Tests for broker request and response models."""

from ibkr_bridge.broker.models import OrderRequest, OrderResult, SessionStatus, SessionToken
from ibkr_bridge.config.defaults import OrderDefaults
from ibkr_bridge.signals.intake import parse_signal


class TestOrderRequest:
    """Test deriving orders from signals."""

    def test_buy_defaults(self):
        signal = parse_signal('{"symbol": "aapl", "action": "BUY"}')
        order = OrderRequest.from_signal(signal, "DU1234567", 265598)

        assert order.side == "BUY"
        assert order.quantity == 1
        assert order.sec_type == "STK"
        assert order.order_type == "MKT"
        assert order.tif == "DAY"

    def test_fractional_sell(self):
        signal = parse_signal('{"ticker": "btcusdt", "action": "sell", "order_size": "0.5"}')
        order = OrderRequest.from_signal(signal, "DU1234567", 123456)

        assert order.side == "SELL"
        assert order.to_payload()["quantity"] == 0.5

    def test_custom_order_defaults(self):
        signal = parse_signal('{"symbol": "ES", "action": "buy"}')
        order = OrderRequest.from_signal(
            signal, "DU1234567", 495512563, OrderDefaults(sec_type="FUT", tif="GTC")
        )
        payload = order.to_payload()
        assert payload["secType"] == "FUT"
        assert payload["tif"] == "GTC"


class TestResponseModels:
    """Test parsing of gateway responses."""

    def test_session_token_alternate_key(self):
        assert SessionToken.from_response({"token": "abc"}).access_token == "abc"

    def test_session_status_non_dict(self):
        status = SessionStatus.from_response("ok")
        assert status.authenticated is None
        assert status.raw == "ok"

    def test_session_status_malformed_iserver(self):
        assert SessionStatus.from_response({"iserver": "down"}).connected is None

    def test_order_result_empty_list(self):
        assert OrderResult.from_response([]).id == "unknown"
