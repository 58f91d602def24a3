"""Coinify API client library.

Usage:
    from coinify import CoinifyClient

    client = CoinifyClient(api_key="key", api_secret="secret")
    result = client.invoice_create(
        amount=10.0,
        currency="EUR",
        plugin_name="my-shop",
        plugin_version="1.0",
        description="Order #1001",
    )

    if not result.ok:
        print(f"Transport error {result.error_code}: {result.error_message}")
    elif result.success:
        print(result.data["payment_url"])
"""

from .coinify_client import (
    CoinifyClient,
    ApiResult,
    get_client,
    load_credentials,
    transport_error_code,
    CREDENTIALS_FILE,
)
from .config import Settings, get_settings, DEFAULT_API_BASE_URL, REQUEST_TIMEOUT
from .envelope import ApiError, ResponseEnvelope, parse_envelope
from .signer import Signer, generate_nonce, compute_signature, build_authorization_header

__all__ = [
    "CoinifyClient",
    "ApiResult",
    "get_client",
    "load_credentials",
    "transport_error_code",
    "CREDENTIALS_FILE",
    "REQUEST_TIMEOUT",
    "Settings",
    "get_settings",
    "DEFAULT_API_BASE_URL",
    "ApiError",
    "ResponseEnvelope",
    "parse_envelope",
    "Signer",
    "generate_nonce",
    "compute_signature",
    "build_authorization_header",
]
