"""
Abstract base class for venue adapters.

This module defines the ExchangeAdapter interface that every venue-specific
implementation must follow, so callers can trade on any venue through one
set of operations and one data model.

Each operation follows the same pipeline:
    1. Load the market catalog if needed
    2. Validate arguments locally (ArgumentError, before any request)
    3. Build the request, signing it for private endpoints
    4. Execute it through the transport
    5. Classify errors from the status and body
    6. Normalize the payload into the shared models

Example:
    >>> async with CurrencyComAdapter(config.exchange) as adapter:
    ...     book = await adapter.get_order_book("BTC/USD", limit=10)
    ...     print(book.best_bid, book.best_ask)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

from exchange_normalizer.models.account import Balance, TradingFees
from exchange_normalizer.models.market import Instrument
from exchange_normalizer.models.order import Order
from exchange_normalizer.models.orderbook import OrderBook
from exchange_normalizer.models.ticker import Candle, Ticker
from exchange_normalizer.models.trade import Trade


class ExchangeAdapter(ABC):
    """
    Abstract base class for venue adapters.

    Note:
        All financial values in returned models use Decimal for precision.
        Never use float for prices, quantities, or notional values.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase venue identifier.

        Returns:
            str: Venue name used in logs and error messages.
        """
        pass

    @abstractmethod
    async def list_instruments(self) -> List[Instrument]:
        """
        List every instrument the venue offers, including inactive ones.

        Returns:
            List[Instrument]: Normalized instruments in venue order.
        """
        pass

    @abstractmethod
    async def get_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """
        Fetch an order book snapshot.

        Args:
            symbol: Canonical symbol (e.g., "BTC/USD").
            limit: Maximum levels per side.

        Returns:
            OrderBook: Snapshot with the venue's last-update id as nonce.
        """
        pass

    @abstractmethod
    async def get_ticker(self, symbol: str) -> Ticker:
        """Fetch the 24h ticker of one instrument."""
        pass

    @abstractmethod
    async def get_tickers(self, symbols: Optional[List[str]] = None) -> List[Ticker]:
        """Fetch 24h tickers of all instruments, optionally filtered by symbol."""
        pass

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """Fetch OHLCV candles."""
        pass

    @abstractmethod
    async def get_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Fetch recent public trades."""
        pass

    @abstractmethod
    async def get_balances(self) -> Balance:
        """Fetch account balances."""
        pass

    @abstractmethod
    async def get_trading_fees(self) -> TradingFees:
        """Fetch account maker/taker commission."""
        pass

    @abstractmethod
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
        Place an order.

        Args:
            symbol: Canonical symbol.
            type: "limit" or "market".
            side: "buy" or "sell".
            amount: Quantity in base currency.
            price: Limit price (required for limit orders).
            extra: Venue-specific request parameters.

        Returns:
            Order: Snapshot of the created order.

        Raises:
            ArgumentError: If required arguments are missing.
            InvalidOrder: If the venue rejects the order parameters.
            InsufficientFunds: If the balance does not cover the order.
        """
        pass

    @abstractmethod
    async def cancel_order(
        self,
        id: str,
        symbol: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Cancel an order.

        Raises:
            ArgumentError: If symbol is missing.
            OrderNotFound: If the order does not exist.
        """
        pass

    @abstractmethod
    async def get_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Fetch open orders."""
        pass

    @abstractmethod
    async def get_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Fetch the account's own trades."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release network resources.

        Must be safe to call multiple times and when nothing is open.
        """
        pass

    async def __aenter__(self) -> "ExchangeAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
