"""HTTP client for the Client Portal gateway session."""

import socket
import ssl
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import orjson

from .. import __version__
from ..config.defaults import BrokerApiConfig
from ..errors import ApiError, AuthenticationError
from ..logging.config import get_broker_logger
from .models import UNKNOWN_ORDER_ID, OrderRequest, OrderResult, SessionStatus, SessionToken

AUTH_PATH = "/oauth/token"
TICKLE_PATH = "/tickle"
ACCOUNT_PATH = "/account"
ORDER_PATH = "/order"


class BrokerSessionClient:
    """
    Blocking client for the four calls of an order run.

    Every call is a single POST with the configured timeout; failures raise
    immediately and are never retried.
    """

    def __init__(self, config: Optional[BrokerApiConfig] = None):
        self.config = config or BrokerApiConfig()
        self.logger = get_broker_logger(__name__)
        self.base_url = self.config.base_url.rstrip("/")
        self._ssl_context = self._build_ssl_context()
        self._token: Optional[SessionToken] = None

    def _build_ssl_context(self) -> ssl.SSLContext:
        """TLS context; verification off is only safe for a local gateway."""
        context = ssl.create_default_context()
        if not self.config.verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def authenticate(self, username: str, password: str) -> SessionToken:
        """
        Log in to the gateway.

        Raises:
            AuthenticationError: If the broker rejects the login or the
                response is not a usable JSON object
        """
        self.logger.info("Authenticating with IBKR", username=username)
        payload = self._post(
            "authenticate",
            AUTH_PATH,
            {"username": username, "password": password},
            error_cls=AuthenticationError,
        )

        if not isinstance(payload, dict) or not payload:
            raise AuthenticationError(
                "Authentication failed: Unknown error",
                response_body=payload
            )
        if payload.get("error"):
            raise AuthenticationError(
                f"Authentication failed: {payload['error']}",
                response_body=payload
            )

        self._token = SessionToken.from_response(payload)
        self.logger.info("Authentication successful")
        return self._token

    def check_session(self) -> SessionStatus:
        """Ping the session; the status is informational only."""
        payload = self._post("check_session", TICKLE_PATH)
        status = SessionStatus.from_response(payload)
        self.logger.info(
            "Session status",
            authenticated=status.authenticated,
            connected=status.connected
        )
        return status

    def select_account(self, account_id: str) -> None:
        """Make ``account_id`` the active account for the session."""
        self._post("select_account", ACCOUNT_PATH, {"acctId": account_id})
        self.logger.info("Selected account", account_id=account_id)

    def submit_order(self, order: OrderRequest) -> OrderResult:
        """
        Submit a market order.

        Raises:
            ApiError: On a non-success response, with the diagnostic body
                attached as ``response_body``
        """
        body = order.to_payload()
        self.logger.info("Placing order", order=body)
        payload = self._post("submit_order", ORDER_PATH, body)

        result = OrderResult.from_response(payload)
        if result.id == UNKNOWN_ORDER_ID:
            self.logger.warning("Order response carried no order id", response=payload)
        self.logger.info("Order response", order_id=result.id, response=payload)
        return result

    def _post(
        self,
        step: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        error_cls: type = ApiError,
    ) -> Any:
        """POST to the gateway and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        data = orjson.dumps(body) if body is not None else None
        headers = {
            'Accept': 'application/json',
            'User-Agent': f'ibkr-bridge/{__version__}'
        }
        if data is not None:
            headers['Content-Type'] = 'application/json'
            headers['Content-Length'] = str(len(data))
        if self._token is not None and self._token.access_token:
            headers['Authorization'] = f"Bearer {self._token.access_token}"

        req = Request(url, data=data, headers=headers, method="POST")

        try:
            with urlopen(req, timeout=self.config.timeout_seconds, context=self._ssl_context) as response:
                response_code = response.getcode()
                payload = self._decode(response.read())

        except HTTPError as e:
            error_body = self._decode(e.read())
            self.logger.error(
                "IBKR API error",
                step=step,
                url=url,
                response_code=e.code,
                response=error_body
            )
            raise error_cls(
                f"{step} failed: HTTP {e.code} {e.reason}",
                step=step,
                status_code=e.code,
                response_body=error_body
            ) from e

        except (OSError, URLError, socket.timeout) as e:
            self.logger.error("IBKR network error", step=step, url=url, error=str(e))
            raise ApiError(
                f"{step} failed: network error: {e}",
                step=step
            ) from e

        if not 200 <= response_code < 300:
            self.logger.error(
                "IBKR API error",
                step=step,
                url=url,
                response_code=response_code,
                response=payload
            )
            raise error_cls(
                f"{step} failed: HTTP {response_code}",
                step=step,
                status_code=response_code,
                response_body=payload
            )

        return payload

    @staticmethod
    def _decode(raw: Optional[bytes]) -> Any:
        """Decode a JSON body, keeping undecodable text as-is."""
        if not raw:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            return raw.decode("utf-8", errors="replace")
