"""
Shared fixtures.

The adapter is exercised against an in-memory FakeTransport that records
every request and replays canned venue payloads keyed by endpoint path.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit

import pytest

from exchange_normalizer.adapters.currencycom import CurrencyComAdapter, MarketCatalog
from exchange_normalizer.config.models import Credentials, ExchangeConfig
from exchange_normalizer.interfaces.transport import RawResponse, Transport

FIXED_NOW_MS = 1590998061253
API_PREFIX = "/api/v1/"


EXCHANGE_INFO: Dict[str, Any] = {
    "timezone": "UTC",
    "serverTime": 1590998061253,
    "rateLimits": [],
    "exchangeFilters": [],
    "symbols": [
        {
            "symbol": "BTC/USD_LEVERAGE",
            "status": "TRADING",
            "baseAsset": "BTC",
            "baseAssetPrecision": 3,
            "quoteAsset": "USD",
            "quoteAssetId": "USD_LEVERAGE",
            "quotePrecision": 3,
            "orderTypes": ["LIMIT", "MARKET"],
            "filters": [
                {"filterType": "PRICE_FILTER", "minPrice": "0.01", "maxPrice": "0", "tickSize": "0.01"},
                {"filterType": "LOT_SIZE", "minQty": "0.001", "maxQty": "100", "stepSize": "0.001"},
                {"filterType": "MIN_NOTIONAL", "minNotional": "11"},
            ],
            "marketType": "LEVERAGE",
        },
        {
            "symbol": "ETH/USD",
            "status": "TRADING",
            "baseAsset": "ETH",
            "baseAssetPrecision": 2,
            "quoteAsset": "USD",
            "quotePrecision": 2,
            "orderTypes": ["LIMIT", "MARKET"],
            "filters": [
                {"filterType": "PRICE_FILTER", "minPrice": "0.01", "maxPrice": "100000", "tickSize": "0.01"},
                {"filterType": "LOT_SIZE", "minQty": "0.01", "maxQty": "1000", "stepSize": "0.01000000"},
                {"filterType": "MARKET_LOT_SIZE", "minQty": "0.01", "maxQty": "500"},
            ],
            "marketType": "SPOT",
        },
        {
            "symbol": "EVK",
            "status": "BREAK",
            "baseAsset": "EVK",
            "baseAssetPrecision": 0,
            "quoteAsset": "EUR",
            "quotePrecision": 3,
            "orderTypes": ["LIMIT", "MARKET"],
            "filters": [],
            "marketType": "SPOT",
        },
    ],
}


@dataclass
class RecordedRequest:
    """One request as seen by the FakeTransport."""

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str]

    @property
    def path(self) -> str:
        return urlsplit(self.url).path.split(API_PREFIX, 1)[-1]

    @property
    def query(self) -> str:
        return urlsplit(self.url).query

    @property
    def params(self) -> Dict[str, str]:
        """Parameters from the query string, or from the form body."""
        return dict(parse_qsl(self.body if self.body else self.query))


@dataclass
class FakeTransport(Transport):
    """
    Transport that replays queued responses per endpoint path.

    The last queued response for a path is reused once the queue is down
    to one, so fixtures can register a payload once.
    """

    routes: Dict[str, List[RawResponse]] = field(default_factory=dict)
    failures: Dict[str, Exception] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)
    close_calls: int = 0

    def add(
        self,
        path: str,
        payload: Any = None,
        status: int = 200,
        body: Optional[str] = None,
        reason: str = "OK",
    ) -> None:
        text = body if body is not None else json.dumps(payload)
        try:
            parsed = json.loads(text) if text else None
        except ValueError:
            parsed = None
        self.routes.setdefault(path, []).append(
            RawResponse(status=status, reason=reason, body=text, json_body=parsed)
        )

    def fail(self, path: str, error: Exception) -> None:
        """Raise ``error`` for every request to ``path``."""
        self.failures[path] = error

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> RawResponse:
        recorded = RecordedRequest(method=method, url=url, headers=dict(headers or {}), body=body)
        self.requests.append(recorded)
        if recorded.path in self.failures:
            raise self.failures[recorded.path]
        queue = self.routes.get(recorded.path)
        if not queue:
            raise AssertionError(f"Unexpected request {method} {url}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    async def close(self) -> None:
        self.close_calls += 1

    def requests_to(self, path: str) -> List[RecordedRequest]:
        return [request for request in self.requests if request.path == path]


@pytest.fixture
def exchange_info() -> Dict[str, Any]:
    return json.loads(json.dumps(EXCHANGE_INFO))


@pytest.fixture
def catalog(exchange_info: Dict[str, Any]) -> MarketCatalog:
    return MarketCatalog.from_exchange_info(exchange_info)


@pytest.fixture
def config() -> ExchangeConfig:
    return ExchangeConfig(
        credentials=Credentials(api_key="test-key", secret="test-secret"),
    )


@pytest.fixture
def transport(exchange_info: Dict[str, Any]) -> FakeTransport:
    fake = FakeTransport()
    fake.add("exchangeInfo", exchange_info)
    return fake


@pytest.fixture
def clock():
    return lambda: FIXED_NOW_MS


@pytest.fixture
def adapter(config: ExchangeConfig, transport: FakeTransport, clock) -> CurrencyComAdapter:
    return CurrencyComAdapter(config, transport=transport, clock=clock)
