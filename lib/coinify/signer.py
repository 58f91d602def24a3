"""Request signing for the Coinify API.

Every authenticated call carries an ``Authorization`` header of the form:

    Coinify apikey="<api_key>", nonce="<nonce>", signature="<signature>"

where ``signature`` is the lowercase hex HMAC-SHA256 of ``nonce + api_key``
keyed with the API secret. The secret itself is never sent.

API Reference: https://coinify.com/docs/api/#authentication
"""

from __future__ import annotations

import hashlib
import hmac
import threading
import time
from typing import Optional

AUTH_SCHEME = "Coinify"

_nonce_lock = threading.Lock()
_last_nonce = 0


def generate_nonce() -> str:
    """Generate a nonce from the current time in microseconds.

    Nonces are strictly increasing within the process: if the clock does
    not advance between two calls (or steps back), the previous value is
    bumped by one.
    """
    global _last_nonce
    with _nonce_lock:
        nonce = int(time.time() * 1_000_000)
        if nonce <= _last_nonce:
            nonce = _last_nonce + 1
        _last_nonce = nonce
    return str(nonce)


def compute_signature(nonce: str, api_key: str, api_secret: str) -> str:
    """HMAC-SHA256 of ``nonce + api_key`` keyed with ``api_secret``, as lowercase hex."""
    message = f"{nonce}{api_key}".encode("utf-8")
    return hmac.new(api_secret.encode("utf-8"), message, hashlib.sha256).hexdigest().lower()


def build_authorization_header(api_key: str, nonce: str, signature: str) -> str:
    return f'{AUTH_SCHEME} apikey="{api_key}", nonce="{nonce}", signature="{signature}"'


class Signer:
    """Produces ``Authorization`` header values for one set of credentials.

    Usage:
        signer = Signer(api_key="key", api_secret="secret")
        headers = {"Authorization": signer.authorization_header()}
    """

    def __init__(self, api_key: str, api_secret: str) -> None:
        self.api_key = api_key
        self._api_secret = api_secret

    def __repr__(self) -> str:
        return f"Signer(api_key={self.api_key!r})"

    def sign(self, nonce: str) -> str:
        """Sign a nonce with this signer's credentials."""
        return compute_signature(nonce, self.api_key, self._api_secret)

    def authorization_header(self, nonce: Optional[str] = None) -> str:
        """Build the header value, generating a fresh nonce unless one is given.

        Args:
            nonce: Explicit nonce (mainly for tests); must be unused for this key

        Returns:
            Value for the ``Authorization`` HTTP header
        """
        if nonce is None:
            nonce = generate_nonce()
        return build_authorization_header(self.api_key, nonce, self.sign(nonce))
