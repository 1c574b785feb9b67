"""Tests for the error classification system."""

from ibkr_bridge.errors import (
    ApiError,
    AuthenticationError,
    BrokerError,
    ConfigurationError,
    GracefulDegradationError,
    LoggingError,
    UnrecoverableError,
)


class TestErrorClassification:
    """Test error hierarchy and attributes."""

    def test_configuration_error(self):
        error = ConfigurationError("No symbol provided in signal", missing_fields=["symbol"])
        assert isinstance(error, UnrecoverableError)
        assert error.recoverable is False
        assert error.missing_fields == ["symbol"]
        assert error.context == {}

    def test_broker_error_hierarchy(self):
        auth_error = AuthenticationError("Authentication failed: denied")
        assert isinstance(auth_error, BrokerError)
        assert auth_error.step == "authenticate"
        assert auth_error.recoverable is False

        api_error = ApiError("submit_order failed", step="submit_order",
                             status_code=400, response_body={"error": "rejected"})
        assert isinstance(api_error, BrokerError)
        assert not isinstance(api_error, AuthenticationError)
        assert api_error.status_code == 400
        assert api_error.response_body == {"error": "rejected"}

    def test_error_context(self):
        error = ApiError("failed", context={"url": "https://localhost:5000/v1/portal/order"})
        assert error.context["url"].endswith("/order")

    def test_logging_error_degrades(self):
        error = LoggingError("disk full", operation="write", target="trade_history.json",
                             degraded_functionality="trade_history")
        assert isinstance(error, GracefulDegradationError)
        assert not isinstance(error, UnrecoverableError)
        assert error.allows_degradation is True
        assert error.operation == "write"
        assert error.degraded_functionality == "trade_history"
