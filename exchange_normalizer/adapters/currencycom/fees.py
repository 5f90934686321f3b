"""
Pre-trade fee estimates from the static per-market rates.
"""

from decimal import Decimal
from typing import Optional

from exchange_normalizer.errors import ArgumentError
from exchange_normalizer.models.account import FeeQuote
from exchange_normalizer.models.market import Instrument
from exchange_normalizer.utils.precision import ROUND, decimal_to_precision
from exchange_normalizer.utils.safe import to_decimal


def calculate_fee(
    instrument: Instrument,
    side: str,
    amount: Decimal,
    price: Optional[Decimal],
    taker_or_maker: str = "taker",
) -> FeeQuote:
    """
    Estimate the fee of a prospective trade.

    Sells are charged in the quote currency (amount * rate * price, rounded
    to price precision). Buys are charged in the base currency
    (amount * rate, rounded to amount precision).

    Args:
        instrument: Market to trade.
        side: "buy" or "sell".
        amount: Quantity in base currency.
        price: Expected price; required for sells.
        taker_or_maker: Liquidity role selecting the rate.

    Returns:
        FeeQuote: Role, currency, rate and rounded cost.

    Raises:
        ArgumentError: On an unknown side or role, a missing sell price or a
            market without a rate.
    """
    context = {"operation": "calculate_fee", "symbol": instrument.symbol}

    order_side = str(side).lower()
    if order_side not in ("buy", "sell"):
        raise ArgumentError(f"side must be 'buy' or 'sell', got {side!r}", context=context)

    if taker_or_maker not in ("taker", "maker"):
        raise ArgumentError(
            f"taker_or_maker must be 'taker' or 'maker', got {taker_or_maker!r}",
            context=context,
        )

    rate = instrument.taker if taker_or_maker == "taker" else instrument.maker
    if rate is None:
        raise ArgumentError(f"No {taker_or_maker} rate for {instrument.symbol}", context=context)

    cost = to_decimal(amount) * rate
    if order_side == "sell":
        if price is None:
            raise ArgumentError("A sell fee estimate requires a price", context=context)
        cost *= to_decimal(price)
        currency = instrument.quote
        precision = instrument.precision.price
    else:
        currency = instrument.base
        precision = instrument.precision.amount

    if precision is not None:
        cost = Decimal(decimal_to_precision(cost, ROUND, precision))

    return FeeQuote(type=taker_or_maker, currency=currency, rate=rate, cost=cost)
