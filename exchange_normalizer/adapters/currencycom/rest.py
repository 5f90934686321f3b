"""
Currency.com HTTP transport.

Executes requests built by the RequestSigner over a shared aiohttp session.
Implements rate limiting to avoid venue bans and reports every response as
received; classifying venue errors is left to the adapter.

Rate Limits:
    - Currency.com: one request per 500ms
    - Default: 2 per second with simple time-based throttling
"""

import asyncio
import json
from typing import Dict, Optional

import aiohttp
import structlog

from exchange_normalizer.errors import ExchangeUnavailable, RequestTimeout
from exchange_normalizer.interfaces.transport import RawResponse, Transport

logger = structlog.get_logger(__name__)

USER_AGENT = "exchange-normalizer/0.1"


class CurrencyComRestClient(Transport):
    """
    Async aiohttp transport.

    Attributes:
        rate_limit_per_second: Maximum requests per second.
        timeout_seconds: Total request timeout.

    Example:
        >>> client = CurrencyComRestClient(rate_limit_per_second=2)
        >>> response = await client.request("GET", "https://.../api/v1/time")
        >>> response.json_body["serverTime"]
        1590998061253
    """

    def __init__(
        self,
        rate_limit_per_second: int = 2,
        timeout_seconds: int = 10,
    ):
        self.rate_limit_per_second = rate_limit_per_second
        self.timeout_seconds = timeout_seconds

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0.0
        self._request_interval = 1.0 / rate_limit_per_second

        logger.info(
            "rest_client_initialized",
            rate_limit=rate_limit_per_second,
            timeout_seconds=timeout_seconds,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed")
        self._session = None

    async def _rate_limit(self) -> None:
        """
        Apply rate limiting using simple time-based throttling.

        Ensures minimum interval between requests.
        """
        loop = asyncio.get_running_loop()
        time_since_last = loop.time() - self._last_request_time

        if time_since_last < self._request_interval:
            await asyncio.sleep(self._request_interval - time_since_last)

        self._last_request_time = loop.time()

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> RawResponse:
        """
        Execute one HTTP request.

        Raises:
            ExchangeUnavailable: If the connection fails.
            RequestTimeout: If the request exceeds the timeout.
        """
        await self._rate_limit()
        session = await self._ensure_session()

        try:
            async with session.request(method, url, headers=headers, data=body) as response:
                text = await response.text()
                try:
                    parsed = json.loads(text) if text else None
                except ValueError:
                    parsed = None

                return RawResponse(
                    status=response.status,
                    reason=response.reason or "",
                    body=text,
                    json_body=parsed,
                    headers={key: value for key, value in response.headers.items()},
                )

        # aiohttp read timeouts subclass both ClientError and TimeoutError
        except asyncio.TimeoutError as e:
            logger.error("rest_timeout", method=method, timeout=self.timeout_seconds)
            raise RequestTimeout(
                f"REST request timeout after {self.timeout_seconds}s",
                context={"method": method},
            ) from e
        except aiohttp.ClientError as e:
            logger.error("rest_client_error", method=method, error=str(e))
            raise ExchangeUnavailable(
                f"REST request failed: {e}",
                context={"method": method},
            ) from e
