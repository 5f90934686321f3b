"""
Abstract HTTP transport.

The transport executes one request and reports exactly what came back. It
does not decide whether a response is a business failure: venue adapters
classify the returned status and body themselves. Rate limiting, timeouts
and connection pooling belong to the transport.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class RawResponse(BaseModel):
    """
    Response as received from the wire.

    Attributes:
        status: HTTP status code.
        reason: HTTP reason phrase.
        body: Undecoded response text.
        json_body: Parsed JSON, or None when the body is not JSON.
        headers: Response headers.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    status: int
    reason: str = ""
    body: str = ""
    json_body: Optional[Any] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(ABC):
    """HTTP transport used by venue adapters."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> RawResponse:
        """
        Execute one HTTP request.

        Args:
            method: HTTP method (GET, POST, DELETE).
            url: Absolute URL including any query string.
            headers: Request headers.
            body: Encoded request body.

        Returns:
            RawResponse: Status, body and parsed JSON.

        Raises:
            ExchangeUnavailable: If the connection fails.
            RequestTimeout: If the request times out.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        pass
