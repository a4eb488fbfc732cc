"""
Request Signing Module

Signs outgoing YaYa Wallet API requests with HMAC-SHA256.
The pre-hash string is the plain concatenation timestamp + method + endpoint + body.
"""

import base64
import hashlib
import hmac
import time
from typing import Callable, Dict


def generate_signature(
    secret: str,
    timestamp: str,
    method: str,
    endpoint: str,
    body: str = ""
) -> str:
    """
    Generate the Base64-encoded HMAC-SHA256 signature for one request.

    Args:
        secret: API secret used as the HMAC key
        timestamp: Milliseconds since epoch as a decimal string
        method: Upper-case HTTP verb
        endpoint: Request path starting with '/', without query string
        body: Exact JSON body sent ('' for GET)

    Returns:
        Standard Base64 signature string

    Example:
        >>> sig = generate_signature("secret", "1700000000000", "GET",
        ...                          "/api/en/transaction/find-by-user")
        >>> # Same inputs always give the same signature
    """
    pre_hash = timestamp + method + endpoint + body
    digest = hmac.new(
        secret.encode("utf-8"),
        pre_hash.encode("utf-8"),
        hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def current_timestamp_ms() -> str:
    return str(int(time.time() * 1000))


class RequestSigner:
    """
    Build authentication headers for YaYa Wallet API calls.

    The upstream rejects timestamps outside a short freshness window,
    so headers must be built right before the request goes out.
    """

    API_KEY_HEADER = "YAYA-API-KEY"
    TIMESTAMP_HEADER = "YAYA-API-TIMESTAMP"
    SIGNATURE_HEADER = "YAYA-API-SIGN"

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        clock: Callable[[], str] = current_timestamp_ms
    ):
        """
        Args:
            api_key: Public API key sent with every request
            api_secret: Secret used to sign requests (never transmitted)
            clock: Returns the current timestamp in milliseconds as a string
        """
        self.api_key = api_key
        self._api_secret = api_secret
        self._clock = clock

    def sign(self, timestamp: str, method: str, endpoint: str, body: str = "") -> str:
        return generate_signature(self._api_secret, timestamp, method, endpoint, body)

    def build_headers(self, method: str, endpoint: str, body: str = "") -> Dict[str, str]:
        """
        Build the full header set for one upstream call.

        One timestamp is read per call and used both for the signature
        and for the transmitted timestamp header.

        Args:
            method: Upper-case HTTP verb
            endpoint: Request path (no query string)
            body: Exact body string that will be transmitted

        Returns:
            Header dictionary with content negotiation and auth headers
        """
        timestamp = self._clock()
        signature = self.sign(timestamp, method, endpoint, body)

        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            self.API_KEY_HEADER: self.api_key,
            self.TIMESTAMP_HEADER: timestamp,
            self.SIGNATURE_HEADER: signature,
        }
