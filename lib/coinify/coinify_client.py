"""Coinify API client.

Coinify is a payment processor for virtual currencies. This client covers
the merchant invoice endpoints:
- list all invoices
- create an invoice
- get a specific invoice
- update the description/custom data of an invoice

Every call is signed (see ``coinify.signer``), performed as a single blocking
request and returned as an ``ApiResult``. The decoded JSON is passed through
untouched; checking the envelope's ``success`` flag is up to the caller.

API Reference: https://coinify.com/docs/api/
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_API_BASE_URL, REQUEST_TIMEOUT, Settings, get_settings
from .envelope import ResponseEnvelope, parse_envelope
from .signer import Signer

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT")
CREDENTIALS_FILE = Path.home() / ".coinify_credentials.json"

INVOICES_PATH = "/v3/invoices"

# Transport error codes, most specific exception first
# (SSLError, ConnectTimeout and ProxyError are all ConnectionErrors).
TRANSPORT_ERROR_CODES = (
    (requests.exceptions.SSLError, "ssl_error"),
    (requests.exceptions.Timeout, "timeout"),
    (requests.exceptions.ProxyError, "proxy_error"),
    (requests.exceptions.ConnectionError, "connection_error"),
    (requests.exceptions.TooManyRedirects, "too_many_redirects"),
    (requests.exceptions.InvalidURL, "invalid_url"),
    (requests.exceptions.MissingSchema, "invalid_url"),
    (requests.exceptions.InvalidSchema, "invalid_url"),
)
DEFAULT_TRANSPORT_ERROR_CODE = "request_error"


def transport_error_code(exc: requests.exceptions.RequestException) -> str:
    """Map a requests exception to a stable error code."""
    for exc_type, code in TRANSPORT_ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return DEFAULT_TRANSPORT_ERROR_CODE


def load_credentials(credentials_file: Optional[Path] = None) -> dict:
    """Load API key and secret from credentials file."""
    creds_path = credentials_file or CREDENTIALS_FILE
    if not creds_path.exists():
        raise FileNotFoundError(f"Credentials file not found: {creds_path}")
    return json.loads(creds_path.read_text())


@dataclass
class ApiResult:
    """Outcome of a single API call.

    ``ok`` tells whether the HTTP exchange itself worked. When it did,
    ``response`` holds the decoded JSON (None if the body was not valid
    JSON) and ``status_code`` the HTTP status. When it did not,
    ``error_message`` and ``error_code`` describe the transport failure.

    Example:
        result = client.invoice_get(42)
        if not result.ok:
            print(f"Call failed: {result.error_code} {result.error_message}")
        elif result.success:
            print(result.data["state"])
        else:
            print(result.response["error"]["message"])
    """
    ok: bool
    response: Any = None
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def failed(cls, message: str, code: str) -> "ApiResult":
        return cls(ok=False, error_message=message, error_code=code)

    @property
    def success(self) -> bool:
        """True if the call went through and the envelope reports success."""
        return self.ok and isinstance(self.response, dict) and self.response.get("success") is True

    @property
    def data(self) -> Any:
        """The envelope's ``data`` value, or None."""
        if isinstance(self.response, dict):
            return self.response.get("data")
        return None

    def envelope(self) -> Optional[ResponseEnvelope]:
        """Typed view of the response, or None if it is not an envelope."""
        return parse_envelope(self.response)


class CoinifyClient:
    """Coinify API client.

    Usage:
        client = CoinifyClient(api_key="key", api_secret="secret")
        result = client.invoice_create(10.0, "EUR", "my-shop", "1.0")
        if result.success:
            invoice = result.data
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        api_base_url: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize client.

        Args:
            api_key: Coinify API key. Get yours at https://coinify.com/merchant/api
            api_secret: Coinify API secret, only used to sign requests
            api_base_url: Base URL without trailing slash (default: production API)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.api_base_url = (api_base_url if api_base_url is not None else DEFAULT_API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._signer = Signer(api_key, api_secret)

    def __repr__(self) -> str:
        return f"CoinifyClient(api_key={self.api_key!r}, api_base_url={self.api_base_url!r})"

    @classmethod
    def from_credentials(cls, credentials_file: Optional[Path] = None) -> "CoinifyClient":
        """Create client from credentials file.

        Args:
            credentials_file: Path to JSON file with api_key, api_secret and
                optionally api_base_url. Defaults to ~/.coinify_credentials.json
        """
        creds = load_credentials(credentials_file)
        if not isinstance(creds, dict):
            raise ValueError("Credentials file must contain a JSON object")
        api_key = creds.get("api_key")
        api_secret = creds.get("api_secret")
        if not api_key or not api_secret:
            raise ValueError("No api_key/api_secret found in credentials file")

        return cls(api_key, api_secret, api_base_url=creds.get("api_base_url"))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CoinifyClient":
        """Create client from environment settings (COINIFY_API_KEY etc.)."""
        settings = settings or get_settings()
        return cls(
            settings.coinify_api_key,
            settings.coinify_api_secret,
            api_base_url=settings.coinify_api_base_url,
            timeout=settings.coinify_request_timeout,
        )

    # ==================== INVOICES ====================

    def invoices_list(self) -> ApiResult:
        """Return all your invoices.

        https://coinify.com/docs/api/#list-all-invoices

        Returns:
            ApiResult whose ``data`` is a list of invoices on success
        """
        return self.call_api_authenticated(INVOICES_PATH)

    def invoice_create(
        self,
        amount: float,
        currency: str,
        plugin_name: str,
        plugin_version: str,
        description: Optional[str] = None,
        custom: Optional[Dict[str, Any]] = None,
        callback_url: Optional[str] = None,
        callback_email: Optional[str] = None,
        return_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> ApiResult:
        """Create a new invoice.

        https://coinify.com/docs/api/#create-an-invoice

        Args:
            amount: Fiat price of the invoice
            currency: 3 letter ISO 4217 currency code denominating amount
            plugin_name: The name of the plugin used to call this API
            plugin_version: The version of the above plugin
            description: Your custom text for this invoice
            custom: Your custom data for this invoice
            callback_url: URL Coinify calls when the invoice state changes
            callback_email: Email address notified when the invoice state changes
            return_url: Customer is redirected here when the invoice has been paid
            cancel_url: Customer is redirected here if they cancel the invoice

        Returns:
            ApiResult whose ``data`` is the new invoice on success
        """
        params: Dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "return_url": return_url,
            "cancel_url": cancel_url,
            "plugin_name": plugin_name,
            "plugin_version": plugin_version,
        }

        if description is not None:
            params["description"] = description
        if custom is not None:
            params["custom"] = custom
        if callback_url is not None:
            params["callback_url"] = callback_url
        if callback_email is not None:
            params["callback_email"] = callback_email

        return self.call_api_authenticated(INVOICES_PATH, "POST", params)

    def invoice_get(self, invoice_id: Any) -> ApiResult:
        """Get a specific invoice.

        https://coinify.com/docs/api/#get-a-specific-invoice
        """
        return self.call_api_authenticated(f"{INVOICES_PATH}/{invoice_id}")

    def invoice_update(
        self,
        invoice_id: Any,
        description: Optional[str] = None,
        custom: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        """Update the description and custom data of an invoice.

        https://coinify.com/docs/api/#update-an-invoice

        Only the fields that are given are sent.
        """
        params: Dict[str, Any] = {}

        if description is not None:
            params["description"] = description
        if custom is not None:
            params["custom"] = custom

        return self.call_api_authenticated(f"{INVOICES_PATH}/{invoice_id}", "PUT", params)

    # ==================== TRANSPORT ====================

    def call_api_authenticated(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        """Perform an authenticated API call.

        Args:
            path: API path WITH leading slash, e.g. /v3/invoices
            method: HTTP method (GET, POST, PUT)
            params: Parameters sent as JSON body (ignored for GET)

        Returns:
            ApiResult with the decoded JSON response, whatever the HTTP
            status, or the transport error if the request could not be made
        """
        if not path.startswith("/"):
            raise ValueError(f"API path must start with '/': {path!r}")
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.api_base_url}{path}"
        headers = {"Authorization": self._signer.authorization_header()}
        json_data = None
        if method != "GET":
            json_data = params if params is not None else {}

        logger.debug(f"Coinify request: {method} {path}")

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            code = transport_error_code(e)
            logger.warning(f"Coinify request failed: {method} {path} ({code}): {e}")
            return ApiResult.failed(str(e) or e.__class__.__name__, code)

        try:
            decoded = response.json()
        except ValueError:
            logger.warning(
                f"Coinify response is not valid JSON: {method} {path} "
                f"status={response.status_code}, body={response.text[:200]}"
            )
            decoded = None

        logger.debug(f"Coinify response: {method} {path} status={response.status_code}")
        return ApiResult(ok=True, response=decoded, status_code=response.status_code)


# Module-level client for reuse across calls
_client: Optional[CoinifyClient] = None


def get_client() -> CoinifyClient:
    """Get or create CoinifyClient instance.

    Uses COINIFY_API_KEY/COINIFY_API_SECRET when set, otherwise falls back
    to the credentials file.
    """
    global _client
    if _client is None:
        settings = get_settings()
        if settings.has_credentials:
            _client = CoinifyClient.from_settings(settings)
        else:
            _client = CoinifyClient.from_credentials()
    return _client
