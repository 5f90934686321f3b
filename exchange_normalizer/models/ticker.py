"""
Ticker and candle data models.

Models:
    Ticker: Point-in-time 24h statistics for an instrument
    Candle: One OHLCV bar
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class Ticker(BaseModel):
    """
    24-hour ticker snapshot.

    Every price field is optional: the venue's bulk ticker endpoint only
    reports high/low/volume, while the single-symbol endpoint fills in the
    rest.

    Attributes:
        symbol: Canonical symbol, or the raw venue id when the instrument is
            not in the catalog.
        timestamp: Close time of the 24h window in milliseconds.
        close: Last traded price (``last`` is an alias).
        previous_close: Previous day close.
        change: Absolute price change over the window.
        percentage: Percentage price change over the window.
        average: (open + close) / 2 when both are known.
        base_volume: Volume in base currency.
        quote_volume: Volume in quote currency.
        info: Raw venue record.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = None
    timestamp: Optional[int] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    bid_volume: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    ask_volume: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    close: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    average: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def last(self) -> Optional[Decimal]:
        return self.close

    @property
    def datetime_utc(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @property
    def price_range_24h_pct(self) -> Optional[Decimal]:
        """
        Calculate 24-hour price range as a percentage.

        Formula: (high - low) / low * 100

        Returns:
            Optional[Decimal]: Range percentage, or None if high/low unknown
                or low is 0.
        """
        if self.high is None or self.low is None or self.low <= Decimal("0"):
            return None
        return ((self.high - self.low) / self.low) * Decimal("100")


class Candle(BaseModel):
    """
    One OHLCV bar.

    The venue sends candles as positional arrays
    ``[timestamp, open, high, low, close, volume]``; ``as_tuple()`` returns
    the same order.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    timestamp: Optional[int] = None
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    close: Optional[Decimal] = None
    volume: Optional[Decimal] = None

    def as_tuple(
        self,
    ) -> Tuple[
        Optional[int],
        Optional[Decimal],
        Optional[Decimal],
        Optional[Decimal],
        Optional[Decimal],
        Optional[Decimal],
    ]:
        return (self.timestamp, self.open, self.high, self.low, self.close, self.volume)
