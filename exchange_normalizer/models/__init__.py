"""
Venue-agnostic trading data models.

This module exports all data models produced by the venue adapters.
All models are frozen Pydantic models and use Decimal for financial values.

Modules:
    market: Instruments with precision and limits
    orderbook: Order book snapshots and price levels
    ticker: Tickers and OHLCV candles
    trade: Trades, sides and fees
    order: Orders and the canonical status set
    account: Balances, accounts and fee quotes

Example:
    >>> from exchange_normalizer.models import Instrument, Order, OrderStatus
"""

# Market models
from exchange_normalizer.models.market import (
    Instrument,
    InstrumentLimits,
    InstrumentPrecision,
    MarketType,
    MinMax,
)

# Order book models
from exchange_normalizer.models.orderbook import (
    OrderBook,
    PriceLevel,
)

# Ticker models
from exchange_normalizer.models.ticker import (
    Candle,
    Ticker,
)

# Trade models
from exchange_normalizer.models.trade import (
    Fee,
    TakerOrMaker,
    Trade,
    TradeSide,
)

# Order models
from exchange_normalizer.models.order import (
    ORDER_STATUS_TRANSITIONS,
    TERMINAL_STATUSES,
    Order,
    OrderStatus,
    can_transition,
    is_terminal,
)

# Account models
from exchange_normalizer.models.account import (
    Account,
    Balance,
    BalanceEntry,
    FeeQuote,
    TradingFees,
)

__all__ = [
    # Market
    "MarketType",
    "MinMax",
    "InstrumentLimits",
    "InstrumentPrecision",
    "Instrument",
    # Order book
    "PriceLevel",
    "OrderBook",
    # Ticker
    "Ticker",
    "Candle",
    # Trade
    "TradeSide",
    "TakerOrMaker",
    "Fee",
    "Trade",
    # Order
    "OrderStatus",
    "Order",
    "TERMINAL_STATUSES",
    "ORDER_STATUS_TRANSITIONS",
    "is_terminal",
    "can_transition",
    # Account
    "BalanceEntry",
    "Balance",
    "Account",
    "TradingFees",
    "FeeQuote",
]
