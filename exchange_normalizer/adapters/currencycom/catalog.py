"""
Currency.com market catalog.

Builds normalized Instruments from the ``/exchangeInfo`` payload and holds
them in an immutable snapshot indexed by both venue id and canonical symbol.

exchangeInfo format:

    {
        "timezone": "UTC",
        "serverTime": 1590998061253,
        "symbols": [
            {
                "symbol": "BTC/USD_LEVERAGE",
                "status": "TRADING",
                "baseAsset": "BTC",
                "baseAssetPrecision": 3,
                "quoteAsset": "USD",
                "quoteAssetId": "USD_LEVERAGE",
                "quotePrecision": 3,
                "filters": [
                    {"filterType": "LOT_SIZE", "minQty": "0.001",
                     "maxQty": "100", "stepSize": "0.001"},
                    {"filterType": "MIN_NOTIONAL", "minNotional": "11"}
                ],
                "marketType": "LEVERAGE"
            }
        ]
    }

Derivation rules, applied in order:
    1. Precision defaults to (quotePrecision, baseAssetPrecision) for
       (price, amount); amount minimum defaults to 10^-amountPrecision and
       cost minimum to -log10(amountPrecision), as the venue documents it.
    2. PRICE_FILTER sets price bounds (a zero maxPrice means unbounded) and
       price precision from tickSize.
    3. LOT_SIZE sets amount precision from stepSize and amount bounds.
    4. MARKET_LOT_SIZE sets the separate market-order quantity bounds.
    5. MIN_NOTIONAL sets the cost minimum.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import structlog
from pydantic import ValidationError

from exchange_normalizer.config.models import FeeSchedule
from exchange_normalizer.errors import BadSymbol, DataError
from exchange_normalizer.models.market import (
    Instrument,
    InstrumentLimits,
    InstrumentPrecision,
    MarketType,
    MinMax,
)
from exchange_normalizer.utils.precision import precision_from_string
from exchange_normalizer.utils.safe import (
    index_by,
    safe_currency_code,
    safe_decimal,
    safe_integer,
    safe_string,
    safe_string_lower,
    safe_value,
)

logger = structlog.get_logger(__name__)

# Legacy venue market types and their canonical names
MARKET_TYPE_ALIASES: Dict[str, str] = {
    "leverage": MarketType.MARGIN.value,
}

TRADING_STATUS = "TRADING"


def _default_amount_min(amount_precision: Optional[int]) -> Optional[Decimal]:
    if amount_precision is None:
        return None
    return Decimal(10) ** -amount_precision


def _default_cost_min(amount_precision: Optional[int]) -> Optional[Decimal]:
    # The venue derives this from the digit count itself, so zero
    # precision yields +Infinity.
    if amount_precision is None:
        return None
    return -Decimal(amount_precision).log10()


def build_instrument(market: Dict[str, Any], fees: Optional[FeeSchedule] = None) -> Instrument:
    """
    Normalize one raw exchangeInfo symbol record.

    Args:
        market: Raw symbol record.
        fees: Static fee schedule to attach; venue defaults if omitted.

    Returns:
        Instrument: Normalized instrument. Inactive instruments are returned
            too, with ``active=False``.

    Raises:
        DataError: If the record has no symbol id, no base or quote asset,
            a negative precision or a malformed filter.
    """
    fees = fees or FeeSchedule()

    market_id = safe_string(market, "symbol")
    if not market_id:
        raise DataError(
            "Market record without a symbol id",
            context={"operation": "build_instrument"},
            raw=str(market),
        )

    base_id = safe_string(market, "baseAsset")
    quote_id = safe_string(market, "quoteAsset")
    base = safe_currency_code(base_id)
    quote = safe_currency_code(quote_id)
    if "/" in market_id:
        symbol = market_id
    elif base and quote:
        symbol = f"{base}/{quote}"
    else:
        raise DataError(
            f"Market {market_id} has no base or quote asset",
            context={"operation": "build_instrument", "market_id": market_id},
            raw=str(market),
        )

    filters = safe_value(market, "filters", [])
    if not isinstance(filters, list):
        raise DataError(
            "Market filters must be a list",
            context={"operation": "build_instrument", "market_id": market_id},
            raw=str(market),
        )
    filters_by_type = index_by(filters, "filterType")

    price_precision = safe_integer(market, "quotePrecision")
    amount_precision = safe_integer(market, "baseAssetPrecision")
    precisions = {"quotePrecision": price_precision, "baseAssetPrecision": amount_precision}
    for key, value in precisions.items():
        if value is not None and value < 0:
            raise DataError(
                f"Market {market_id} has a negative {key}: {value}",
                context={"operation": "build_instrument", "market_id": market_id},
                raw=str(market),
            )

    amount_limits = MinMax(min=_default_amount_min(amount_precision))
    price_limits = MinMax()
    cost_limits = MinMax(min=_default_cost_min(amount_precision))
    market_limits = MinMax()

    try:
        if "PRICE_FILTER" in filters_by_type:
            price_filter = filters_by_type["PRICE_FILTER"]
            max_price = safe_decimal(price_filter, "maxPrice")
            if max_price is not None and max_price <= 0:
                max_price = None
            price_limits = MinMax(min=safe_decimal(price_filter, "minPrice"), max=max_price)
            tick_size = safe_string(price_filter, "tickSize")
            if tick_size is not None:
                price_precision = precision_from_string(tick_size)

        if "LOT_SIZE" in filters_by_type:
            lot_filter = filters_by_type["LOT_SIZE"]
            step_size = safe_string(lot_filter, "stepSize")
            if step_size is not None:
                amount_precision = precision_from_string(step_size)
            amount_limits = MinMax(
                min=safe_decimal(lot_filter, "minQty"),
                max=safe_decimal(lot_filter, "maxQty"),
            )

        if "MARKET_LOT_SIZE" in filters_by_type:
            market_lot_filter = filters_by_type["MARKET_LOT_SIZE"]
            market_limits = MinMax(
                min=safe_decimal(market_lot_filter, "minQty"),
                max=safe_decimal(market_lot_filter, "maxQty"),
            )

        if "MIN_NOTIONAL" in filters_by_type:
            notional_filter = filters_by_type["MIN_NOTIONAL"]
            cost_limits = MinMax(
                min=safe_decimal(notional_filter, "minNotional"),
                max=cost_limits.max,
            )
    except (ValueError, ValidationError) as e:
        raise DataError(
            f"Invalid filter in market {market_id}: {e}",
            context={"operation": "build_instrument", "market_id": market_id},
            raw=str(market),
        ) from e

    market_type = safe_string_lower(market, "marketType")
    if market_type is not None:
        market_type = MARKET_TYPE_ALIASES.get(market_type, market_type)

    try:
        return Instrument(
            id=market_id,
            symbol=symbol,
            base=base,
            quote=quote,
            base_id=base_id,
            quote_id=quote_id,
            type=market_type,
            active=safe_string(market, "status") == TRADING_STATUS,
            precision=InstrumentPrecision(price=price_precision, amount=amount_precision),
            limits=InstrumentLimits(
                amount=amount_limits,
                price=price_limits,
                cost=cost_limits,
                market=market_limits,
            ),
            maker=fees.maker,
            taker=fees.taker,
            info=market,
        )
    except ValidationError as e:
        raise DataError(
            f"Invalid market {market_id}: {e}",
            context={"operation": "build_instrument", "market_id": market_id},
            raw=str(market),
        ) from e


def build_instruments(response: Any, fees: Optional[FeeSchedule] = None) -> List[Instrument]:
    """
    Normalize every symbol in an exchangeInfo response.

    A response without a ``symbols`` field yields an empty list; a
    ``symbols`` field of the wrong shape is a DataError.

    Args:
        response: Parsed exchangeInfo JSON.
        fees: Static fee schedule to attach.

    Returns:
        List[Instrument]: Instruments in venue order.

    Raises:
        DataError: If the payload is malformed.
    """
    if not isinstance(response, dict):
        raise DataError(
            "exchangeInfo response must be an object",
            context={"operation": "build_instruments"},
            raw=str(response),
        )

    markets = response.get("symbols")
    if markets is None:
        logger.warning("exchange_info_without_symbols")
        return []
    if not isinstance(markets, list):
        raise DataError(
            "exchangeInfo symbols must be a list",
            context={"operation": "build_instruments"},
            raw=str(response),
        )

    instruments: List[Instrument] = []
    for market in markets:
        if not isinstance(market, dict):
            raise DataError(
                "exchangeInfo symbol entries must be objects",
                context={"operation": "build_instruments"},
                raw=str(market),
            )
        instruments.append(build_instrument(market, fees))
    return instruments


class MarketCatalog:
    """
    Immutable snapshot of the venue's instruments.

    Lookups by venue id and by canonical symbol are both O(1). A refresh
    builds a new catalog; existing references keep seeing the old snapshot.

    Example:
        >>> catalog = MarketCatalog.from_exchange_info(response)
        >>> catalog.market("BTC/USD_LEVERAGE").type
        'margin'
        >>> catalog.by_id("EVK").symbol
        'EVK/EUR'
    """

    def __init__(self, instruments: Iterable[Instrument] = ()):
        self._instruments: Tuple[Instrument, ...] = tuple(instruments)
        self._by_id: Mapping[str, Instrument] = MappingProxyType(
            {instrument.id: instrument for instrument in self._instruments}
        )
        self._by_symbol: Mapping[str, Instrument] = MappingProxyType(
            {instrument.symbol: instrument for instrument in self._instruments}
        )

    @classmethod
    def from_exchange_info(
        cls, response: Any, fees: Optional[FeeSchedule] = None
    ) -> "MarketCatalog":
        """Build a catalog from a raw exchangeInfo response."""
        catalog = cls(build_instruments(response, fees))
        logger.info(
            "market_catalog_built",
            instruments=len(catalog),
            active=sum(1 for instrument in catalog if instrument.active),
        )
        return catalog

    @property
    def instruments(self) -> Tuple[Instrument, ...]:
        return self._instruments

    @property
    def symbols(self) -> List[str]:
        return list(self._by_symbol)

    @property
    def ids(self) -> List[str]:
        return list(self._by_id)

    def __len__(self) -> int:
        return len(self._instruments)

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._instruments)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def by_id(self, market_id: Optional[str]) -> Optional[Instrument]:
        if market_id is None:
            return None
        return self._by_id.get(market_id)

    def by_symbol(self, symbol: Optional[str]) -> Optional[Instrument]:
        if symbol is None:
            return None
        return self._by_symbol.get(symbol)

    def market(self, symbol: str) -> Instrument:
        """
        Look up an instrument by canonical symbol, falling back to venue id.

        Raises:
            BadSymbol: If neither lookup matches.
        """
        instrument = self.by_symbol(symbol) or self.by_id(symbol)
        if instrument is None:
            raise BadSymbol(
                f"Unknown market symbol {symbol}",
                context={"symbol": symbol},
            )
        return instrument
