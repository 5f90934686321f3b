"""
Market (instrument) metadata models.

An Instrument describes one tradable base/quote pair as listed by a venue,
together with the precision and limit metadata needed to build valid orders.
Instruments are built once per catalog refresh and never mutated.

Models:
    MinMax: Optional lower/upper bound
    InstrumentLimits: Amount, price, cost and market-order bounds
    InstrumentPrecision: Decimal places for price and amount
    Instrument: Complete normalized market record
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, Field


class MarketType(str, Enum):
    """Known market types. Unknown venue types are kept as plain strings."""

    SPOT = "spot"
    MARGIN = "margin"


BoundValue = Annotated[Decimal, Field(allow_inf_nan=True)]


class MinMax(BaseModel):
    """
    Inclusive bounds; None means unbounded.

    Infinite values are allowed because some derived defaults (the venue's
    cost minimum for zero-precision assets) evaluate to infinity.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    min: Optional[BoundValue] = None
    max: Optional[BoundValue] = None


class InstrumentLimits(BaseModel):
    """Trading limits for an instrument."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(
        default_factory=MinMax,
        description="Order quantity bounds in base currency",
    )
    price: MinMax = Field(
        default_factory=MinMax,
        description="Price bounds in quote currency",
    )
    cost: MinMax = Field(
        default_factory=MinMax,
        description="Notional (price * amount) bounds in quote currency",
    )
    market: MinMax = Field(
        default_factory=MinMax,
        description="Quantity bounds for market orders, when they differ",
    )


class InstrumentPrecision(BaseModel):
    """Decimal places accepted by the venue."""

    model_config = {"frozen": True, "extra": "forbid"}

    price: Optional[int] = Field(default=None, ge=0)
    amount: Optional[int] = Field(default=None, ge=0)


class Instrument(BaseModel):
    """
    Normalized market listing.

    Attributes:
        id: Venue symbol (e.g., "BTC/USD_LEVERAGE", "EVK").
        symbol: Canonical "BASE/QUOTE" symbol.
        base: Normalized base currency code.
        quote: Normalized quote currency code.
        base_id: Venue base asset id.
        quote_id: Venue quote asset id.
        type: "spot", "margin" or the venue's own type string.
        active: True only when the venue status is TRADING.
        precision: Price and amount decimal places.
        limits: Amount, price, cost and market-order bounds.
        maker: Static maker fee rate.
        taker: Static taker fee rate.
        info: Raw venue record.

    Example:
        >>> instrument.symbol
        'BTC/USD'
        >>> instrument.precision.amount
        3
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1, description="Venue symbol")
    symbol: str = Field(..., min_length=1, description="Canonical BASE/QUOTE symbol")
    base: Optional[str] = None
    quote: Optional[str] = None
    base_id: Optional[str] = None
    quote_id: Optional[str] = None
    type: Optional[str] = None
    active: bool = False
    precision: InstrumentPrecision = Field(default_factory=InstrumentPrecision)
    limits: InstrumentLimits = Field(default_factory=InstrumentLimits)
    maker: Optional[Decimal] = Field(default=None, description="Maker fee rate")
    taker: Optional[Decimal] = Field(default=None, description="Taker fee rate")
    info: Dict[str, Any] = Field(default_factory=dict, description="Raw venue record")

    @property
    def spot(self) -> bool:
        return self.type == MarketType.SPOT.value

    @property
    def margin(self) -> bool:
        return self.type == MarketType.MARGIN.value
