"""
Currency.com venue adapter.

Main adapter implementation that implements the ExchangeAdapter interface.
Coordinates request signing, the HTTP transport, error classification and
data normalization.

This adapter:
    - Owns the market catalog snapshot and replaces it on explicit reload
    - Signs private requests and optionally corrects for clock skew
    - Classifies every response once, right after the transport returns
    - Normalizes venue payloads to the shared models

Example:
    >>> from exchange_normalizer.adapters.currencycom import CurrencyComAdapter
    >>> from exchange_normalizer.config import load_config
    >>>
    >>> config = load_config()
    >>> async with CurrencyComAdapter(config.exchange) as adapter:
    ...     book = await adapter.get_order_book("BTC/USD_LEVERAGE", limit=10)
    ...     order = await adapter.place_order(
    ...         "ETH/USD", "limit", "buy", Decimal("0.1"), price=Decimal("150")
    ...     )
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Optional

import structlog

from exchange_normalizer.adapters.currencycom.catalog import MarketCatalog
from exchange_normalizer.adapters.currencycom.errors import classify_response
from exchange_normalizer.adapters.currencycom.fees import calculate_fee
from exchange_normalizer.adapters.currencycom.normalizer import CurrencyComNormalizer
from exchange_normalizer.adapters.currencycom.orders import normalize_order, normalize_orders
from exchange_normalizer.adapters.currencycom.rest import CurrencyComRestClient
from exchange_normalizer.adapters.currencycom.signer import PRIVATE, PUBLIC, RequestSigner
from exchange_normalizer.config.models import ExchangeConfig
from exchange_normalizer.errors import ArgumentError, DataError, VenueError
from exchange_normalizer.interfaces.exchange_adapter import ExchangeAdapter
from exchange_normalizer.interfaces.transport import Transport
from exchange_normalizer.models.account import Account, Balance, FeeQuote, TradingFees
from exchange_normalizer.models.market import Instrument
from exchange_normalizer.models.order import Order
from exchange_normalizer.models.orderbook import OrderBook
from exchange_normalizer.models.ticker import Candle, Ticker
from exchange_normalizer.models.trade import Trade
from exchange_normalizer.utils.precision import ROUND, TRUNCATE, decimal_to_precision
from exchange_normalizer.utils.safe import (
    filter_by_since_limit,
    filter_by_symbols,
    safe_integer,
    safe_value,
)

logger = structlog.get_logger(__name__)

# Canonical timeframe -> venue kline interval
TIMEFRAMES: Dict[str, str] = {
    "1m": "1m",
    "3m": "3m",
    "5m": "5m",
    "15m": "15m",
    "30m": "30m",
    "1h": "1h",
    "4h": "4h",
    "1d": "1d",
    "1w": "1w",
}

ORDER_TYPES = frozenset({"limit", "market"})
ORDER_SIDES = frozenset({"buy", "sell"})


@contextmanager
def error_context(context: Dict[str, Any]) -> Iterator[None]:
    """
    Attach the caller's operation and identifiers to any VenueError raised
    inside the block. Caller values take precedence over the local ones.
    """
    try:
        yield
    except VenueError as e:
        e.context.update(context)
        raise


class CurrencyComAdapter(ExchangeAdapter):
    """
    Currency.com adapter implementing the ExchangeAdapter interface.

    The market catalog is loaded lazily by the first operation that needs
    it and cached until ``reload_markets()`` is called.

    Attributes:
        exchange_name: Venue name from the configuration.
        catalog: Current market catalog snapshot, or None before loading.

    Example:
        >>> adapter = CurrencyComAdapter(config.exchange)
        >>> instruments = await adapter.list_instruments()
        >>> await adapter.close()
    """

    def __init__(
        self,
        config: ExchangeConfig,
        transport: Optional[Transport] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the adapter.

        Args:
            config: Venue configuration.
            transport: HTTP transport; an aiohttp client is created if omitted.
            clock: Millisecond clock used for signing and clock skew.
        """
        self._config = config
        self._transport = transport or CurrencyComRestClient(
            rate_limit_per_second=config.connection.rate_limit_per_second,
            timeout_seconds=config.connection.timeout_seconds,
        )
        self._signer = RequestSigner(config, clock)
        self._catalog: Optional[MarketCatalog] = None

        logger.info(
            "currencycom_adapter_initialized",
            rest_url=config.rest_url,
            private_enabled=config.credentials.is_complete,
        )

    @property
    def exchange_name(self) -> str:
        return self._config.name

    @property
    def catalog(self) -> Optional[MarketCatalog]:
        return self._catalog

    @property
    def time_difference(self) -> int:
        """Cached local minus venue clock offset in milliseconds."""
        return self._signer.time_difference

    # =========================================================================
    # REQUEST PIPELINE
    # =========================================================================

    async def _request(
        self,
        path: str,
        api: str = PUBLIC,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Sign, send and classify one request.

        Returns:
            Any: Parsed JSON body of a successful response.

        Raises:
            VenueError: The classified failure, or DataError when a
                successful response is not JSON.
        """
        context = dict(context or {})
        context.setdefault("operation", path)

        with error_context(context):
            request = self._signer.sign(path, api=api, method=method, params=params)
            logger.debug(
                "venue_request",
                method=request.method,
                path=path,
                signed=api == PRIVATE,
            )
            response = await self._transport.request(
                request.method,
                request.url,
                headers=request.headers,
                body=request.body,
            )

        classified = classify_response(
            response.status,
            response.reason,
            response.body,
            response.json_body,
            exchange_name=self.exchange_name,
            context=context,
        )
        if classified is not None:
            logger.warning(
                "venue_error_classified",
                kind=classified.kind.value,
                retryable=classified.retryable,
                status=response.status,
                **context,
            )
            raise classified.to_exception()

        if response.json_body is None:
            raise DataError(
                f"{self.exchange_name} returned a non-JSON response",
                context=context,
                raw=response.body,
            )
        return response.json_body

    # =========================================================================
    # MARKETS AND CLOCK
    # =========================================================================

    async def load_markets(self, reload: bool = False) -> MarketCatalog:
        """
        Return the market catalog, fetching it on first use.

        Args:
            reload: Fetch a fresh snapshot even if one is cached.

        Returns:
            MarketCatalog: Current snapshot.
        """
        if self._catalog is not None and not reload:
            return self._catalog

        context = {"operation": "load_markets"}
        response = await self._request("exchangeInfo", context=context)
        if self._config.options.adjust_for_clock_skew:
            await self.refresh_clock_skew()

        with error_context(context):
            self._catalog = MarketCatalog.from_exchange_info(response, self._config.fees)
        return self._catalog

    async def reload_markets(self) -> MarketCatalog:
        return await self.load_markets(reload=True)

    def market(self, symbol: str) -> Instrument:
        """
        Look up an instrument in the loaded catalog.

        Raises:
            ArgumentError: If markets have not been loaded yet.
            BadSymbol: If the symbol is unknown.
        """
        if self._catalog is None:
            raise ArgumentError(
                f"{self.exchange_name} markets not loaded, call load_markets() first",
                context={"symbol": symbol},
            )
        return self._catalog.market(symbol)

    async def _load_market(self, symbol: str, context: Dict[str, Any]) -> Instrument:
        with error_context(context):
            await self.load_markets()
            return self.market(symbol)

    async def get_server_time(self) -> int:
        """Fetch the venue clock in milliseconds."""
        response = await self._request("time", context={"operation": "get_server_time"})
        server_time = safe_integer(response, "serverTime")
        if server_time is None:
            raise DataError(
                "Server time response without serverTime",
                context={"operation": "get_server_time"},
                raw=str(response),
            )
        return server_time

    async def refresh_clock_skew(self) -> int:
        """
        Measure and cache the local/venue clock offset used for signing.

        Returns:
            int: New offset in milliseconds (local - venue).
        """
        server_time = await self.get_server_time()
        return self._signer.update_time_difference(server_time, self._signer.clock())

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    async def list_instruments(self) -> List[Instrument]:
        with error_context({"operation": "list_instruments"}):
            catalog = await self.load_markets()
        return list(catalog.instruments)

    async def get_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        context = {"operation": "get_order_book", "symbol": symbol}
        market = await self._load_market(symbol, context)
        response = await self._request(
            "depth",
            params={"symbol": market.id, "limit": limit},
            context=context,
        )
        with error_context(context):
            return CurrencyComNormalizer.normalize_order_book(response, market)

    async def get_ticker(self, symbol: str) -> Ticker:
        context = {"operation": "get_ticker", "symbol": symbol}
        market = await self._load_market(symbol, context)
        response = await self._request(
            "ticker/24hr",
            params={"symbol": market.id},
            context=context,
        )
        with error_context(context):
            return CurrencyComNormalizer.normalize_ticker(response, self._catalog, market)

    async def get_tickers(self, symbols: Optional[List[str]] = None) -> List[Ticker]:
        context = {"operation": "get_tickers"}
        with error_context(context):
            catalog = await self.load_markets()
        response = await self._request("ticker/24hr", context=context)
        with error_context(context):
            tickers = CurrencyComNormalizer.normalize_tickers(response, catalog)
        return filter_by_symbols(tickers, symbols)

    async def get_candles(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """
        Fetch OHLCV candles.

        Raises:
            ArgumentError: If the timeframe is not supported.
        """
        context = {"operation": "get_candles", "symbol": symbol}
        if timeframe not in TIMEFRAMES:
            raise ArgumentError(
                f"{self.exchange_name} does not support timeframe {timeframe!r}",
                context=context,
            )
        market = await self._load_market(symbol, context)
        response = await self._request(
            "klines",
            params={
                "symbol": market.id,
                "interval": TIMEFRAMES[timeframe],
                "startTime": since,
                "limit": limit,
            },
            context=context,
        )
        with error_context(context):
            candles = CurrencyComNormalizer.normalize_candles(response)
        return filter_by_since_limit(candles, since, limit)

    async def get_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        context = {"operation": "get_trades", "symbol": symbol}
        market = await self._load_market(symbol, context)
        response = await self._request(
            "aggTrades",
            params={"symbol": market.id, "limit": limit},
            context=context,
        )
        with error_context(context):
            trades = CurrencyComNormalizer.normalize_trades(response, self._catalog, market)
        return filter_by_since_limit(trades, since, limit)

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    async def _get_account(self, parse: Callable[[Any], Any], operation: str) -> Any:
        context = {"operation": operation}
        with error_context(context):
            await self.load_markets()
        response = await self._request("account", api=PRIVATE, context=context)
        with error_context(context):
            return parse(response)

    async def get_balances(self) -> Balance:
        return await self._get_account(CurrencyComNormalizer.normalize_balance, "get_balances")

    async def get_accounts(self) -> List[Account]:
        return await self._get_account(CurrencyComNormalizer.normalize_accounts, "get_accounts")

    async def get_trading_fees(self) -> TradingFees:
        return await self._get_account(
            CurrencyComNormalizer.normalize_trading_fees, "get_trading_fees"
        )

    def calculate_fee(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
        taker_or_maker: str = "taker",
    ) -> FeeQuote:
        """
        Estimate the fee of a prospective order from the static rates.

        The order type does not affect the estimate; it is accepted so the
        call mirrors ``place_order``.
        """
        with error_context({"operation": "calculate_fee", "symbol": symbol}):
            return calculate_fee(self.market(symbol), side, amount, price, taker_or_maker)

    # =========================================================================
    # PRECISION
    # =========================================================================

    def _to_precision(
        self, symbol: str, value: Decimal, mode: str, precision: Optional[int], field: str
    ) -> str:
        if precision is None:
            return format(Decimal(str(value)), "f")
        try:
            return decimal_to_precision(value, mode, precision)
        except ValueError as e:
            raise ArgumentError(
                f"Invalid {field} {value!r}: {e}",
                context={"symbol": symbol},
            ) from e

    def amount_to_precision(self, symbol: str, amount: Decimal) -> str:
        """Truncate an amount to the market's amount precision."""
        market = self.market(symbol)
        return self._to_precision(symbol, amount, TRUNCATE, market.precision.amount, "amount")

    def price_to_precision(self, symbol: str, price: Decimal) -> str:
        """Round a price to the market's price precision."""
        market = self.market(symbol)
        return self._to_precision(symbol, price, ROUND, market.precision.price, "price")

    def cost_to_precision(self, symbol: str, cost: Decimal) -> str:
        market = self.market(symbol)
        return self._to_precision(symbol, cost, ROUND, market.precision.price, "cost")

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def place_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Place a limit or market order.

        Quantity is truncated to amount precision and price rounded to price
        precision. Margin markets require ``accountId`` in ``extra``; any other
        ``extra`` entries are sent as-is and override computed parameters.

        Raises:
            ArgumentError: On an unknown type or side, a limit order without
                price, or a margin order without accountId.
        """
        extra = dict(extra or {})
        order_type = type.lower()
        order_side = side.lower()
        context = {"operation": "place_order", "symbol": symbol}

        if order_type not in ORDER_TYPES:
            raise ArgumentError(f"Unsupported order type {type!r}", context=context)
        if order_side not in ORDER_SIDES:
            raise ArgumentError(f"Unsupported order side {side!r}", context=context)
        if order_type == "limit" and price is None:
            raise ArgumentError(
                f"{self.exchange_name} place_order requires a price for a limit order",
                context=context,
            )

        market = await self._load_market(symbol, context)
        if market.margin and safe_integer(extra, "accountId") is None:
            raise ArgumentError(
                f"{self.exchange_name} place_order requires an accountId for "
                f"{market.type} market {symbol}",
                context=context,
            )

        with error_context(context):
            request: Dict[str, Any] = {
                "symbol": market.id,
                "quantity": self.amount_to_precision(symbol, amount),
                "type": order_type.upper(),
                "side": order_side.upper(),
                "newOrderRespType": self._config.options.response_type_for(order_type).value,
            }
            if order_type == "limit":
                request["price"] = self.price_to_precision(symbol, price)
                request["timeInForce"] = self._config.options.default_time_in_force.value
        request.update(extra)

        response = await self._request(
            "order", api=PRIVATE, method="POST", params=request, context=context
        )
        with error_context(context):
            order = normalize_order(
                response,
                self._catalog,
                market,
                parse_to_precision=self._config.options.parse_order_to_precision,
            )

        logger.info(
            "order_placed",
            symbol=symbol,
            order_id=order.id,
            type=order_type,
            side=order_side,
            status=order.status,
        )
        return order

    async def cancel_order(
        self,
        id: str,
        symbol: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Cancel an order by venue id, or by ``origClientOrderId`` in ``extra``.

        Raises:
            ArgumentError: If symbol is missing.
        """
        context = {"operation": "cancel_order", "symbol": symbol, "order_id": id}
        if symbol is None:
            raise ArgumentError(
                f"{self.exchange_name} cancel_order requires a symbol",
                context=context,
            )

        extra = dict(extra or {})
        market = await self._load_market(symbol, context)
        request: Dict[str, Any] = {"symbol": market.id}
        orig_client_order_id = safe_value(extra, "origClientOrderId")
        if orig_client_order_id is None:
            request["orderId"] = id
        else:
            request["origClientOrderId"] = orig_client_order_id
        request.update(extra)

        response = await self._request(
            "order", api=PRIVATE, method="DELETE", params=request, context=context
        )
        with error_context(context):
            order = normalize_order(
                response,
                self._catalog,
                market,
                parse_to_precision=self._config.options.parse_order_to_precision,
            )
        logger.info("order_canceled", symbol=symbol, order_id=order.id, status=order.status)
        return order

    async def get_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """
        Fetch open orders.

        Raises:
            ArgumentError: If symbol is omitted while
                ``warn_on_open_orders_without_symbol`` is enabled.
        """
        context = {"operation": "get_open_orders", "symbol": symbol}
        market: Optional[Instrument] = None
        request: Dict[str, Any] = {}
        if symbol is not None:
            market = await self._load_market(symbol, context)
            request["symbol"] = market.id
        elif self._config.options.warn_on_open_orders_without_symbol:
            with error_context(context):
                catalog = await self.load_markets()
            seconds = len(catalog) // 2
            raise ArgumentError(
                f"{self.exchange_name} get_open_orders without a symbol is rate-limited "
                f"to one call per {seconds} seconds; pass a symbol or disable "
                "warn_on_open_orders_without_symbol",
                context=context,
            )
        else:
            with error_context(context):
                await self.load_markets()

        response = await self._request(
            "openOrders",
            api=PRIVATE,
            params=request,
            context=context,
        )
        with error_context(context):
            orders = normalize_orders(
                response,
                self._catalog,
                market,
                parse_to_precision=self._config.options.parse_order_to_precision,
            )
        return filter_by_since_limit(orders, since, limit)

    async def get_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """
        Fetch the account's trades in one market.

        Raises:
            ArgumentError: If symbol is missing.
        """
        context = {"operation": "get_my_trades", "symbol": symbol}
        if symbol is None:
            raise ArgumentError(
                f"{self.exchange_name} get_my_trades requires a symbol",
                context=context,
            )
        market = await self._load_market(symbol, context)
        response = await self._request(
            "myTrades",
            api=PRIVATE,
            params={"symbol": market.id, "limit": limit},
            context=context,
        )
        with error_context(context):
            trades = CurrencyComNormalizer.normalize_trades(response, self._catalog, market)
        return filter_by_since_limit(trades, since, limit)

    async def close(self) -> None:
        await self._transport.close()
        logger.debug("currencycom_adapter_closed")
