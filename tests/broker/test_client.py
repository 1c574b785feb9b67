"""Tests for the Client Portal session client."""

import socket
import ssl
from urllib.error import URLError

import pytest

from ibkr_bridge.broker.client import BrokerSessionClient
from ibkr_bridge.broker.models import OrderRequest
from ibkr_bridge.config.defaults import BrokerApiConfig
from ibkr_bridge.errors import ApiError, AuthenticationError


def make_order(**overrides) -> OrderRequest:
    fields = {"account_id": "DU1234567", "conid": 265598, "side": "BUY", "quantity": 1.0}
    fields.update(overrides)
    return OrderRequest(**fields)


class TestClientConfiguration:
    """Test client construction from explicit configuration."""

    def test_tls_verification_disabled_by_default(self):
        client = BrokerSessionClient()
        assert client._ssl_context.verify_mode == ssl.CERT_NONE
        assert client._ssl_context.check_hostname is False

    def test_tls_verification_enabled(self):
        client = BrokerSessionClient(BrokerApiConfig(verify_tls=True))
        assert client._ssl_context.verify_mode == ssl.CERT_REQUIRED

    def test_timeout_passed_per_request(self, gateway):
        BrokerSessionClient(BrokerApiConfig(timeout_ms=2500)).check_session()
        assert gateway.requests[0]["timeout"] == 2.5

    def test_trailing_slash_in_base_url(self, gateway):
        client = BrokerSessionClient(BrokerApiConfig(base_url="https://localhost:5000/v1/portal/"))
        client.check_session()
        assert gateway.paths == ["/tickle"]


class TestAuthenticate:
    """Test login handling."""

    def test_successful_login(self, gateway):
        client = BrokerSessionClient()
        token = client.authenticate("trader", "s3cret")

        assert token.access_token == "tok-123"
        assert gateway.paths == ["/oauth/token"]
        assert gateway.requests[0]["method"] == "POST"
        assert gateway.body_for("/oauth/token") == {"username": "trader", "password": "s3cret"}

    def test_token_sent_on_later_calls(self, gateway):
        client = BrokerSessionClient()
        client.authenticate("trader", "s3cret")
        client.check_session()

        assert gateway.requests[0]["authorization"] is None
        assert gateway.requests[1]["authorization"] == "Bearer tok-123"

    def test_error_field_rejected(self, gateway):
        gateway.route("/oauth/token", {"error": "invalid credentials"})

        with pytest.raises(AuthenticationError) as exc_info:
            BrokerSessionClient().authenticate("trader", "wrong")

        assert str(exc_info.value) == "Authentication failed: invalid credentials"
        assert exc_info.value.step == "authenticate"
        assert exc_info.value.response_body == {"error": "invalid credentials"}

    def test_empty_body_rejected(self, gateway):
        gateway.route("/oauth/token", b"")
        with pytest.raises(AuthenticationError, match="Unknown error"):
            BrokerSessionClient().authenticate("trader", "s3cret")

    def test_http_rejection(self, gateway):
        gateway.route("/oauth/token", {"message": "unauthorized"}, status=401)

        with pytest.raises(AuthenticationError) as exc_info:
            BrokerSessionClient().authenticate("trader", "s3cret")

        assert exc_info.value.status_code == 401
        assert exc_info.value.response_body == {"message": "unauthorized"}

    def test_login_without_token_field(self, gateway):
        gateway.route("/oauth/token", {"authenticated": True})
        token = BrokerSessionClient().authenticate("trader", "s3cret")
        assert token.access_token is None


class TestCheckSession:
    """Test session liveness probing."""

    def test_status_parsed(self, gateway):
        status = BrokerSessionClient().check_session()
        assert status.authenticated is True
        assert status.connected is True
        assert gateway.requests[0]["body"] is None

    def test_unexpected_shape(self, gateway):
        gateway.route("/tickle", {"session": "a1b2c3"})
        status = BrokerSessionClient().check_session()
        assert status.authenticated is None
        assert status.raw == {"session": "a1b2c3"}

    def test_network_failure(self, gateway):
        gateway.route("/tickle", error=URLError("connection refused"))
        with pytest.raises(ApiError, match="network error") as exc_info:
            BrokerSessionClient().check_session()
        assert exc_info.value.step == "check_session"

    def test_timeout(self, gateway):
        gateway.route("/tickle", error=socket.timeout("timed out"))
        with pytest.raises(ApiError, match="timed out"):
            BrokerSessionClient().check_session()


class TestSelectAccount:
    """Test account selection."""

    def test_account_posted(self, gateway):
        BrokerSessionClient().select_account("DU1234567")
        assert gateway.body_for("/account") == {"acctId": "DU1234567"}

    def test_rejected_account(self, gateway):
        gateway.route("/account", {"error": "Account not found"}, status=400)

        with pytest.raises(ApiError) as exc_info:
            BrokerSessionClient().select_account("DU0000000")

        assert exc_info.value.step == "select_account"
        assert exc_info.value.status_code == 400
        assert not isinstance(exc_info.value, AuthenticationError)


class TestSubmitOrder:
    """Test order submission."""

    def test_order_body(self, gateway):
        BrokerSessionClient().submit_order(make_order())

        assert gateway.body_for("/order") == {
            "acctId": "DU1234567",
            "conid": 265598,
            "secType": "STK",
            "orderType": "MKT",
            "side": "BUY",
            "quantity": 1,
            "tif": "DAY",
        }

    def test_order_id_from_list_response(self, gateway):
        result = BrokerSessionClient().submit_order(make_order())
        assert result.id == "987654"
        assert result.raw_response == [{"order_id": "987654", "order_status": "Submitted"}]

    def test_order_id_from_object_response(self, gateway):
        gateway.route("/order", {"id": 42})
        assert BrokerSessionClient().submit_order(make_order()).id == "42"

    def test_missing_order_id(self, gateway):
        gateway.route("/order", {"status": "ok"})
        assert BrokerSessionClient().submit_order(make_order()).id == "unknown"

    def test_rejection_captures_diagnostics(self, gateway):
        diagnostic = {"error": "No trading permissions", "code": "PERM"}
        gateway.route("/order", diagnostic, status=400)

        with pytest.raises(ApiError) as exc_info:
            BrokerSessionClient().submit_order(make_order())

        assert exc_info.value.step == "submit_order"
        assert exc_info.value.status_code == 400
        assert exc_info.value.response_body == diagnostic
        assert "HTTP 400" in str(exc_info.value)

    def test_non_json_error_body_kept_as_text(self, gateway):
        gateway.route("/order", b"<html>Bad gateway</html>", status=502)

        with pytest.raises(ApiError) as exc_info:
            BrokerSessionClient().submit_order(make_order())

        assert exc_info.value.response_body == "<html>Bad gateway</html>"
