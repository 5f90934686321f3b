"""
Trade data models.

Models:
    TradeSide: Aggressor side of a trade (buy/sell/unknown)
    TakerOrMaker: Liquidity role of our side of a trade
    Fee: Fee paid, with its currency
    Trade: Individual executed trade (public, private or an order fill)
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TradeSide(str, Enum):
    """
    Enumeration for trade side.

    Attributes:
        BUY: Buyer was the aggressor (taker bought), or our account bought.
        SELL: Seller was the aggressor (taker sold), or our account sold.
        UNKNOWN: The payload does not say (e.g. order fills).
    """

    BUY = "buy"
    SELL = "sell"
    UNKNOWN = "unknown"


class TakerOrMaker(str, Enum):
    """Liquidity role."""

    TAKER = "taker"
    MAKER = "maker"
    UNKNOWN = "unknown"


class Fee(BaseModel):
    """Fee charged on a trade or order."""

    model_config = {"frozen": True, "extra": "forbid"}

    cost: Optional[Decimal] = None
    currency: Optional[str] = None


class Trade(BaseModel):
    """
    Executed trade.

    Attributes:
        id: Venue trade id (aggregate id for public trades).
        timestamp: Execution time in milliseconds.
        symbol: Canonical symbol, when resolvable.
        order_id: Owning order id (private trades only).
        side: Aggressor side for public trades, our side for private trades.
        taker_or_maker: Liquidity role, when reported.
        price: Execution price.
        amount: Executed quantity in base currency.
        cost: price * amount.
        fee: Commission, when reported.
        info: Raw venue record.

    Example:
        >>> trade.cost == trade.price * trade.amount
        True
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    timestamp: Optional[int] = None
    symbol: Optional[str] = None
    order_id: Optional[str] = None
    side: TradeSide = TradeSide.UNKNOWN
    taker_or_maker: TakerOrMaker = TakerOrMaker.UNKNOWN
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def datetime_utc(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY

    @property
    def is_sell(self) -> bool:
        return self.side == TradeSide.SELL
