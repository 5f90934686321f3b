"""
Currency.com market data normalizer.

Converts Currency.com JSON formats to the shared Pydantic models. All
financial values are converted to Decimal.

Order Book Format (/depth):
    {
        "lastUpdateId": 1590999849037,
        "asks": [[0.02495, 60.0000], [0.02496, 120.0000]],
        "bids": [[0.02487, 60.0000], [0.02486, 120.0000]]
    }

Ticker Format (/ticker/24hr with symbol):
    {
        "symbol": "ETH/BTC",
        "priceChange": "0.00030",
        "priceChangePercent": "1.21",
        "weightedAvgPrice": "0.02481",
        "prevClosePrice": "0.02447",
        "lastPrice": "0.02477",
        "bidPrice": "0.02477",
        "askPrice": "0.02484",
        "openPrice": "0.02447",
        "highPrice": "0.02524",
        "lowPrice": "0.02438",
        "volume": "11.97",
        "quoteVolume": "0.298053",
        "openTime": 1590969600000,
        "closeTime": 1591000072693
    }
    Without a symbol the endpoint returns a list of reduced records
    (symbol, highPrice, lowPrice, volume, quoteVolume, openTime, closeTime).

Candle Format (/klines):
    [1590971040000, "0.02454", "0.02456", "0.02452", "0.02456", 249]

Trade Formats:
    Public aggregate trade (/aggTrades):
        {"a": 1658318071, "p": "0.02476", "q": "0.0", "T": 1591001423382, "m": false}
    Order fill (embedded in /order responses):
        {"price": "9807.05", "qty": "0.01", "commission": "0", "commissionAsset": "dUSD"}
    Account trade (/myTrades):
        {"symbol": "BNBBTC", "id": 28457, "orderId": 100234, "price": "4.00000100",
         "qty": "12.00000000", "commission": "10.10000000", "commissionAsset": "BNB",
         "time": 1499865549590, "isBuyer": true, "isMaker": false}

Account Format (/account):
    {
        "makerCommission": 0.20,
        "takerCommission": 0.20,
        "balances": [
            {"accountId": 2376104765040206, "asset": "BYN", "free": "0", "locked": "0"}
        ]
    }
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import structlog

from exchange_normalizer.adapters.currencycom.catalog import MarketCatalog
from exchange_normalizer.errors import DataError
from exchange_normalizer.models.account import Account, Balance, BalanceEntry, TradingFees
from exchange_normalizer.models.market import Instrument
from exchange_normalizer.models.orderbook import OrderBook, PriceLevel
from exchange_normalizer.models.ticker import Candle, Ticker
from exchange_normalizer.models.trade import Fee, TakerOrMaker, Trade, TradeSide
from exchange_normalizer.utils.safe import (
    safe_currency_code,
    safe_decimal,
    safe_decimal_2,
    safe_integer,
    safe_integer_2,
    safe_string,
    safe_string_2,
    safe_value,
    to_decimal,
)

logger = structlog.get_logger(__name__)


class RawTradeShape(str, Enum):
    """
    Trade payload variants, told apart by which side field is present.

    Attributes:
        AGGREGATE: Public aggregate trade carrying ``m`` (buyer was maker).
        BUYER_MAKER: Trade carrying ``isBuyerMaker``.
        ACCOUNT: Account trade carrying ``isBuyer`` (our own side).
        FILL: Order fill without any side information.
    """

    AGGREGATE = "aggregate"
    BUYER_MAKER = "buyer_maker"
    ACCOUNT = "account"
    FILL = "fill"


def detect_trade_shape(raw: Dict[str, Any]) -> RawTradeShape:
    """Classify a raw trade once, by field presence in priority order."""
    if "m" in raw:
        return RawTradeShape.AGGREGATE
    if "isBuyerMaker" in raw:
        return RawTradeShape.BUYER_MAKER
    if "isBuyer" in raw:
        return RawTradeShape.ACCOUNT
    return RawTradeShape.FILL


def infer_trade_side(shape: RawTradeShape, raw: Dict[str, Any]) -> TradeSide:
    """
    Resolve the trade side for a classified payload.

    For AGGREGATE and BUYER_MAKER the flag says the buyer was the resting
    order, so the aggressor sold: true maps to sell and false to buy.
    ACCOUNT's ``isBuyer`` is our own side and maps directly.
    """
    if shape is RawTradeShape.AGGREGATE:
        return TradeSide.SELL if raw.get("m") else TradeSide.BUY
    if shape is RawTradeShape.BUYER_MAKER:
        return TradeSide.SELL if raw.get("isBuyerMaker") else TradeSide.BUY
    if shape is RawTradeShape.ACCOUNT:
        return TradeSide.BUY if raw.get("isBuyer") else TradeSide.SELL
    return TradeSide.UNKNOWN


class CurrencyComNormalizer:
    """
    Normalizes Currency.com market data to shared models.

    All methods are pure: they read the catalog but never modify it.

    Example:
        >>> book = CurrencyComNormalizer.normalize_order_book(raw_depth, instrument)
        >>> book.nonce
        1590999849037
    """

    @staticmethod
    def _parse_levels(raw_levels: Any, side: str, symbol: str) -> List[PriceLevel]:
        if raw_levels is None:
            return []
        if not isinstance(raw_levels, list):
            raise DataError(
                f"Order book {side} must be a list",
                context={"operation": "normalize_order_book", "symbol": symbol},
                raw=str(raw_levels),
            )

        levels: List[PriceLevel] = []
        for entry in raw_levels:
            if not isinstance(entry, (list, tuple)) or len(entry) < 2:
                raise DataError(
                    f"Malformed order book {side} level",
                    context={"operation": "normalize_order_book", "symbol": symbol},
                    raw=str(entry),
                )
            price = to_decimal(entry[0])
            quantity = to_decimal(entry[1])
            if price is None or quantity is None:
                raise DataError(
                    f"Non-numeric order book {side} level",
                    context={"operation": "normalize_order_book", "symbol": symbol},
                    raw=str(entry),
                )
            levels.append(PriceLevel(price=price, quantity=quantity))
        return levels

    @staticmethod
    def normalize_order_book(raw: Dict[str, Any], instrument: Instrument) -> OrderBook:
        """
        Normalize a depth response.

        Levels keep the venue's ordering; ``lastUpdateId`` becomes the nonce.

        Args:
            raw: Parsed /depth response.
            instrument: Requested instrument.

        Returns:
            OrderBook: Normalized order book.

        Raises:
            DataError: If the payload or a level is malformed.
        """
        if not isinstance(raw, dict):
            raise DataError(
                "Order book response must be an object",
                context={"operation": "normalize_order_book", "symbol": instrument.symbol},
                raw=str(raw),
            )

        bids = CurrencyComNormalizer._parse_levels(raw.get("bids"), "bids", instrument.symbol)
        asks = CurrencyComNormalizer._parse_levels(raw.get("asks"), "asks", instrument.symbol)

        book = OrderBook(
            symbol=instrument.symbol,
            bids=bids,
            asks=asks,
            nonce=safe_integer(raw, "lastUpdateId"),
        )

        logger.debug(
            "normalized_order_book",
            symbol=instrument.symbol,
            nonce=book.nonce,
            bids_count=len(bids),
            asks_count=len(asks),
        )
        return book

    @staticmethod
    def resolve_ticker_symbol(
        market_id: Optional[str],
        catalog: MarketCatalog,
        market: Optional[Instrument] = None,
    ) -> Optional[str]:
        """
        Resolve the canonical symbol of a ticker record.

        Order of preference:
            1. Catalog lookup by venue id
            2. Split a "BASE/QUOTE" id and normalize both legs
            3. The raw venue id as-is
        With no id at all, the symbol of the requested instrument is used.
        """
        if market_id is None:
            return market.symbol if market is not None else None

        instrument = catalog.by_id(market_id)
        if instrument is not None:
            return instrument.symbol

        if "/" in market_id:
            parts = market_id.split("/")
            base = safe_currency_code(parts[0])
            quote = safe_currency_code(parts[1])
            return f"{base}/{quote}"

        return market_id

    @staticmethod
    def normalize_ticker(
        raw: Dict[str, Any],
        catalog: MarketCatalog,
        market: Optional[Instrument] = None,
    ) -> Ticker:
        """
        Normalize a 24h ticker record.

        Args:
            raw: Raw ticker record (full or reduced form).
            catalog: Market catalog for symbol resolution.
            market: Requested instrument, when the caller asked for one.

        Returns:
            Ticker: Normalized ticker; fields absent from the payload are None.
        """
        if not isinstance(raw, dict):
            raise DataError(
                "Ticker record must be an object",
                context={"operation": "normalize_ticker"},
                raw=str(raw),
            )

        symbol = CurrencyComNormalizer.resolve_ticker_symbol(
            safe_string(raw, "symbol"), catalog, market
        )

        last = safe_decimal(raw, "lastPrice")
        open_price = safe_decimal(raw, "openPrice")
        average: Optional[Decimal] = None
        if open_price is not None and last is not None:
            average = (open_price + last) / 2

        return Ticker(
            symbol=symbol,
            timestamp=safe_integer(raw, "closeTime"),
            high=safe_decimal(raw, "highPrice"),
            low=safe_decimal(raw, "lowPrice"),
            bid=safe_decimal(raw, "bidPrice"),
            bid_volume=safe_decimal(raw, "bidQty"),
            ask=safe_decimal(raw, "askPrice"),
            ask_volume=safe_decimal(raw, "askQty"),
            vwap=safe_decimal(raw, "weightedAvgPrice"),
            open=open_price,
            close=last,
            previous_close=safe_decimal(raw, "prevClosePrice"),
            change=safe_decimal(raw, "priceChange"),
            percentage=safe_decimal(raw, "priceChangePercent"),
            average=average,
            base_volume=safe_decimal(raw, "volume"),
            quote_volume=safe_decimal(raw, "quoteVolume"),
            info=raw,
        )

    @staticmethod
    def normalize_tickers(raw: Any, catalog: MarketCatalog) -> List[Ticker]:
        """Normalize a list of ticker records, preserving venue order."""
        if not isinstance(raw, list):
            raise DataError(
                "Tickers response must be a list",
                context={"operation": "normalize_tickers"},
                raw=str(raw),
            )
        return [CurrencyComNormalizer.normalize_ticker(item, catalog) for item in raw]

    @staticmethod
    def normalize_candle(raw: Any) -> Candle:
        """
        Normalize one kline row ``[time, open, high, low, close, volume]``.

        Raises:
            DataError: If the row is not a list.
        """
        if not isinstance(raw, (list, tuple)):
            raise DataError(
                "Candle must be a list",
                context={"operation": "normalize_candle"},
                raw=str(raw),
            )
        return Candle(
            timestamp=safe_integer(raw, 0),
            open=safe_decimal(raw, 1),
            high=safe_decimal(raw, 2),
            low=safe_decimal(raw, 3),
            close=safe_decimal(raw, 4),
            volume=safe_decimal(raw, 5),
        )

    @staticmethod
    def normalize_candles(raw: Any) -> List[Candle]:
        if not isinstance(raw, list):
            raise DataError(
                "Candles response must be a list",
                context={"operation": "normalize_candles"},
                raw=str(raw),
            )
        return [CurrencyComNormalizer.normalize_candle(row) for row in raw]

    @staticmethod
    def normalize_trade(
        raw: Dict[str, Any],
        catalog: MarketCatalog,
        market: Optional[Instrument] = None,
    ) -> Trade:
        """
        Normalize any of the venue's trade payload variants.

        Args:
            raw: Aggregate trade, account trade or order fill.
            catalog: Market catalog for resolving ``symbol`` when no market
                is given.
            market: Instrument the trade belongs to, when known.

        Returns:
            Trade: Normalized trade with cost = price * amount.
        """
        if not isinstance(raw, dict):
            raise DataError(
                "Trade record must be an object",
                context={"operation": "normalize_trade"},
                raw=str(raw),
            )

        shape = detect_trade_shape(raw)
        price = safe_decimal_2(raw, "p", "price")
        amount = safe_decimal_2(raw, "q", "qty")

        fee: Optional[Fee] = None
        if "commission" in raw:
            fee = Fee(
                cost=safe_decimal(raw, "commission"),
                currency=safe_currency_code(safe_string(raw, "commissionAsset")),
            )

        taker_or_maker = TakerOrMaker.UNKNOWN
        if "isMaker" in raw:
            taker_or_maker = TakerOrMaker.MAKER if raw["isMaker"] else TakerOrMaker.TAKER

        if market is None:
            market = catalog.by_id(safe_string(raw, "symbol"))

        cost: Optional[Decimal] = None
        if price is not None and amount is not None:
            cost = price * amount

        return Trade(
            id=safe_string_2(raw, "a", "id"),
            timestamp=safe_integer_2(raw, "T", "time"),
            symbol=market.symbol if market is not None else None,
            order_id=safe_string(raw, "orderId"),
            side=infer_trade_side(shape, raw),
            taker_or_maker=taker_or_maker,
            price=price,
            amount=amount,
            cost=cost,
            fee=fee,
            info=raw,
        )

    @staticmethod
    def normalize_trades(
        raw: Any,
        catalog: MarketCatalog,
        market: Optional[Instrument] = None,
    ) -> List[Trade]:
        """Normalize each trade independently, preserving input order."""
        if not isinstance(raw, list):
            raise DataError(
                "Trades response must be a list",
                context={"operation": "normalize_trades"},
                raw=str(raw),
            )
        return [CurrencyComNormalizer.normalize_trade(item, catalog, market) for item in raw]

    @staticmethod
    def normalize_balance(raw: Dict[str, Any]) -> Balance:
        """
        Normalize an /account response into per-currency balances.

        ``free`` maps to free and ``locked`` to used; entries for the same
        currency code (after aliasing) keep the last one seen.
        """
        if not isinstance(raw, dict):
            raise DataError(
                "Account response must be an object",
                context={"operation": "normalize_balance"},
                raw=str(raw),
            )

        entries: Dict[str, BalanceEntry] = {}
        for item in safe_value(raw, "balances", []):
            code = safe_currency_code(safe_string(item, "asset"))
            if not code:
                continue
            entries[code] = BalanceEntry(
                currency=code,
                free=safe_decimal(item, "free"),
                used=safe_decimal(item, "locked"),
            )
        return Balance(entries=entries, info=raw)

    @staticmethod
    def normalize_accounts(raw: Dict[str, Any]) -> List[Account]:
        """One Account per balance entry; the venue keeps an account per currency."""
        if not isinstance(raw, dict):
            raise DataError(
                "Account response must be an object",
                context={"operation": "normalize_accounts"},
                raw=str(raw),
            )
        return [
            Account(
                id=safe_integer(item, "accountId"),
                currency=safe_currency_code(safe_string(item, "asset")),
                info=raw,
            )
            for item in safe_value(raw, "balances", [])
        ]

    @staticmethod
    def normalize_trading_fees(raw: Dict[str, Any]) -> TradingFees:
        if not isinstance(raw, dict):
            raise DataError(
                "Account response must be an object",
                context={"operation": "normalize_trading_fees"},
                raw=str(raw),
            )
        return TradingFees(
            maker=safe_decimal(raw, "makerCommission"),
            taker=safe_decimal(raw, "takerCommission"),
            info=raw,
        )
