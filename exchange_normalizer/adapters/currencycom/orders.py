"""
Currency.com order normalizer.

Order Format (/order, /openOrders):
    {
        "symbol": "BTC/USD",
        "orderId": "00000000-0000-0000-0000-0000000c0263",
        "clientOrderId": "00000000-0000-0000-0000-0000000c0263",
        "transactTime": 1589878206426,
        "price": "9825.66210000",
        "origQty": "0.01",
        "executedQty": "0.01",
        "status": "FILLED",
        "timeInForce": "FOK",
        "type": "MARKET",
        "side": "BUY",
        "fills": [
            {"price": "9807.05", "qty": "0.01", "commission": "0", "commissionAsset": "dUSD"}
        ]
    }
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import structlog

from exchange_normalizer.adapters.currencycom.catalog import MarketCatalog
from exchange_normalizer.adapters.currencycom.normalizer import CurrencyComNormalizer
from exchange_normalizer.errors import DataError
from exchange_normalizer.models.market import Instrument
from exchange_normalizer.models.order import Order, OrderStatus
from exchange_normalizer.models.trade import Fee, Trade
from exchange_normalizer.utils.precision import ROUND, TRUNCATE, decimal_to_precision
from exchange_normalizer.utils.safe import (
    safe_decimal,
    safe_integer,
    safe_string,
    safe_string_lower,
    safe_value,
)

logger = structlog.get_logger(__name__)

ORDER_STATUSES: Dict[str, str] = {
    "NEW": OrderStatus.OPEN.value,
    "PARTIALLY_FILLED": OrderStatus.OPEN.value,
    "FILLED": OrderStatus.CLOSED.value,
    "CANCELED": OrderStatus.CANCELED.value,
    "PENDING_CANCEL": OrderStatus.CANCELING.value,
    "REJECTED": OrderStatus.REJECTED.value,
    "EXPIRED": OrderStatus.EXPIRED.value,
}


def parse_order_status(status: Optional[str]) -> Optional[str]:
    """
    Map a venue status to its canonical value.

    Unrecognized statuses are returned unchanged.

    Example:
        >>> parse_order_status("PARTIALLY_FILLED")
        'open'
        >>> parse_order_status("SUSPENDED")
        'SUSPENDED'
    """
    if status is None:
        return None
    return ORDER_STATUSES.get(status, status)


def _sum_optional(values: Iterable[Optional[Decimal]]) -> Optional[Decimal]:
    total: Optional[Decimal] = None
    for value in values:
        if value is None:
            continue
        total = value if total is None else total + value
    return total


def _aggregate_fee(trades: List[Trade], order_id: Optional[str]) -> Optional[Fee]:
    fees = [trade.fee for trade in trades if trade.fee is not None]
    if not fees:
        return None

    currency = fees[0].currency
    currencies = {fee.currency for fee in fees}
    if len(currencies) > 1:
        logger.warning(
            "order_fill_fee_currency_mismatch",
            order_id=order_id,
            currencies=sorted(c or "" for c in currencies),
            reported_currency=currency,
        )

    return Fee(cost=_sum_optional(fee.cost for fee in fees), currency=currency)


def normalize_order(
    raw: Dict[str, Any],
    catalog: MarketCatalog,
    market: Optional[Instrument] = None,
    parse_to_precision: bool = False,
) -> Order:
    """
    Normalize an order record.

    Derived fields, in this order:
        1. remaining = max(amount - filled, 0)
        2. cost = cummulativeQuoteQty, else price * filled
        3. market orders reporting price 0 get price = cost / filled
        4. embedded fills replace cost with the sum of fill costs and
           accumulate the fee
        5. average = cost / filled when filled is non-zero

    Args:
        raw: Order record.
        catalog: Market catalog; the record's ``symbol`` wins over ``market``
            when it resolves.
        market: Instrument the order was requested for.
        parse_to_precision: Truncate remaining to amount precision and round
            cost to price precision.

    Returns:
        Order: Normalized snapshot.

    Raises:
        DataError: If the record is not an object.
    """
    if not isinstance(raw, dict):
        raise DataError(
            "Order record must be an object",
            context={"operation": "normalize_order"},
            raw=str(raw),
        )

    market = catalog.by_id(safe_string(raw, "symbol")) or market
    symbol = market.symbol if market is not None else None
    apply_precision = parse_to_precision and market is not None

    timestamp: Optional[int] = None
    if "time" in raw:
        timestamp = safe_integer(raw, "time")
    elif "transactTime" in raw:
        timestamp = safe_integer(raw, "transactTime")

    price = safe_decimal(raw, "price")
    amount = safe_decimal(raw, "origQty")
    filled = safe_decimal(raw, "executedQty")
    cost = safe_decimal(raw, "cummulativeQuoteQty")
    remaining: Optional[Decimal] = None

    if filled is not None:
        if amount is not None:
            remaining = amount - filled
            if apply_precision and market.precision.amount is not None:
                remaining = Decimal(
                    decimal_to_precision(remaining, TRUNCATE, market.precision.amount)
                )
            remaining = max(remaining, Decimal(0))
        if price is not None and cost is None:
            cost = price * filled

    order_type = safe_string_lower(raw, "type")
    if order_type == "market" and price is not None and price == 0:
        if cost is not None and filled is not None and cost > 0 and filled > 0:
            price = cost / filled

    order_id = safe_string(raw, "orderId")
    fee: Optional[Fee] = None
    trades: Optional[List[Trade]] = None
    fills = safe_value(raw, "fills")
    if fills is not None:
        trades = CurrencyComNormalizer.normalize_trades(fills, catalog, market)
        if trades:
            cost = _sum_optional(trade.cost for trade in trades)
            fee = _aggregate_fee(trades, order_id)

    average: Optional[Decimal] = None
    if cost is not None:
        if filled:
            average = cost / filled
        if apply_precision and market.precision.price is not None:
            cost = Decimal(decimal_to_precision(cost, ROUND, market.precision.price))

    return Order(
        id=order_id,
        client_order_id=safe_string(raw, "clientOrderId"),
        timestamp=timestamp,
        symbol=symbol,
        type=order_type,
        side=safe_string_lower(raw, "side"),
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining,
        cost=cost,
        average=average,
        status=parse_order_status(safe_string(raw, "status")),
        time_in_force=safe_string(raw, "timeInForce"),
        fee=fee,
        trades=trades,
        info=raw,
    )


def normalize_orders(
    raw: Any,
    catalog: MarketCatalog,
    market: Optional[Instrument] = None,
    parse_to_precision: bool = False,
) -> List[Order]:
    """Normalize a list of order records, preserving venue order."""
    if not isinstance(raw, list):
        raise DataError(
            "Orders response must be a list",
            context={"operation": "normalize_orders"},
            raw=str(raw),
        )
    return [normalize_order(item, catalog, market, parse_to_precision) for item in raw]
