"""
Request building and HMAC-SHA256 signing for Currency.com.

Private requests carry ``timestamp`` and ``recvWindow`` ahead of the call
parameters; the whole query string is signed with the API secret and the
hex digest appended as ``signature``. Reads (GET, DELETE) put the signed
query on the URL, writes send it as a form-encoded body.
"""

import hashlib
import hmac
import time
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import structlog
from pydantic import BaseModel, Field

from exchange_normalizer.config.models import ExchangeConfig
from exchange_normalizer.errors import AuthenticationError

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "X-MBX-APIKEY"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

PUBLIC = "public"
PRIVATE = "private"

# Public endpoints that still identify the caller by API key
KEYED_PUBLIC_PATHS = frozenset({"historicalTrades"})


def milliseconds() -> int:
    """Current UTC time in milliseconds."""
    return int(time.time() * 1000)


def hmac_sha256_hex(message: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def encode_params(params: Dict[str, Any]) -> str:
    """URL-encode parameters in insertion order, skipping None values."""
    pairs: List[Tuple[str, str]] = [
        (key, _encode_value(value)) for key, value in params.items() if value is not None
    ]
    return urlencode(pairs)


class SignedRequest(BaseModel):
    """Fully built request, ready for the transport."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str
    method: str
    body: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)


class RequestSigner:
    """
    Builds public and signed private requests.

    The signer owns the cached clock offset; it only changes through
    ``update_time_difference``.

    Example:
        >>> signer = RequestSigner(config, clock=lambda: 1590998061253)
        >>> request = signer.sign("account", api="private")
        >>> "signature=" in request.url
        True
    """

    def __init__(self, config: ExchangeConfig, clock: Optional[Callable[[], int]] = None):
        self.config = config
        self.clock = clock or milliseconds
        self.time_difference = 0

    def nonce(self) -> int:
        """Request timestamp corrected by the cached clock offset."""
        return self.clock() - self.time_difference

    def update_time_difference(self, server_time: int, local_time: Optional[int] = None) -> int:
        """
        Cache the offset between the local clock and the venue clock.

        Args:
            server_time: Venue time in milliseconds.
            local_time: Local time the server time was received at.

        Returns:
            int: New offset (local - server).
        """
        if local_time is None:
            local_time = self.clock()
        self.time_difference = local_time - server_time
        logger.info("clock_skew_updated", time_difference_ms=self.time_difference)
        return self.time_difference

    def sign(
        self,
        path: str,
        api: str = PUBLIC,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        """
        Build the request for an endpoint.

        Args:
            path: Endpoint path (e.g., "order").
            api: PUBLIC or PRIVATE.
            method: HTTP method.
            params: Call parameters, in the order they should be encoded.

        Returns:
            SignedRequest: URL, method, body and headers.

        Raises:
            AuthenticationError: If a private request is built without
                complete credentials.
        """
        params = params or {}
        method = method.upper()
        url = self.config.get_rest_url(path)
        credentials = self.config.credentials
        headers: Dict[str, str] = {}
        body: Optional[str] = None

        if api == PRIVATE:
            if not credentials.is_complete:
                raise AuthenticationError(
                    f"{self.config.name} requires api_key and secret for private endpoints",
                    context={"operation": "sign", "path": path},
                )
            query = encode_params(
                {
                    "timestamp": self.nonce(),
                    "recvWindow": self.config.options.recv_window_ms,
                    **params,
                }
            )
            signature = hmac_sha256_hex(query, credentials.secret)
            query = f"{query}&signature={signature}"
            headers[API_KEY_HEADER] = credentials.api_key
            if method in ("GET", "DELETE"):
                url = f"{url}?{query}"
            else:
                body = query
                headers["Content-Type"] = FORM_CONTENT_TYPE
        else:
            if path in KEYED_PUBLIC_PATHS and credentials.api_key:
                headers[API_KEY_HEADER] = credentials.api_key
            query = encode_params(params)
            if query:
                url = f"{url}?{query}"

        return SignedRequest(url=url, method=method, body=body, headers=headers)
