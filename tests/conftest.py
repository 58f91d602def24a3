"""Shared fixtures for the Coinify client tests."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock, patch

import pytest

from coinify import CoinifyClient

API_KEY = "test-api-key"
API_SECRET = "test-api-secret"


def make_response(body: Any = None, status_code: int = 200, text: Optional[str] = None) -> MagicMock:
    """Build a fake requests.Response carrying a JSON body (or raw text)."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else json.dumps(body)
    response.json.side_effect = lambda: json.loads(response.text)
    return response


@pytest.fixture
def client() -> CoinifyClient:
    return CoinifyClient(API_KEY, API_SECRET)


@pytest.fixture
def mock_request():
    """Patch the single HTTP call made by the client."""
    with patch("coinify.coinify_client.requests.request") as mocked:
        mocked.return_value = make_response({"success": True, "data": {}})
        yield mocked
