"""
Order book data models.

All financial values use Decimal for precision to avoid floating-point errors.
Levels are kept in the order the venue sent them; the venue already sorts
bids best (highest) first and asks best (lowest) first.

Models:
    PriceLevel: Single price level in an order book (price, quantity)
    OrderBook: Normalized order book snapshot
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in quote currency.
        quantity: Quantity available at this level in base currency.

    Example:
        >>> level = PriceLevel(price=Decimal("0.02495"), quantity=Decimal("60"))
        >>> level.notional
        Decimal('1.49700')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(
        ...,
        description="Price at this level in quote currency",
        ge=Decimal("0"),
    )
    quantity: Decimal = Field(
        ...,
        description="Quantity available at this level in base currency",
        ge=Decimal("0"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def notional(self) -> Decimal:
        """
        Calculate the notional value at this level.

        Returns:
            Decimal: The product of price and quantity.
        """
        return self.price * self.quantity


class OrderBook(BaseModel):
    """
    Normalized order book snapshot.

    Attributes:
        symbol: Canonical symbol (e.g., "ETH/BTC").
        bids: Bid levels as sent by the venue (best first).
        asks: Ask levels as sent by the venue (best first).
        nonce: Venue last-update id. Increases monotonically, so callers can
            discard a snapshot older than one they already hold.
        timestamp: Snapshot time in milliseconds, when the venue provides it.

    Example:
        >>> book = OrderBook(
        ...     symbol="ETH/BTC",
        ...     bids=[PriceLevel(price=Decimal("0.02487"), quantity=Decimal("60"))],
        ...     asks=[PriceLevel(price=Decimal("0.02495"), quantity=Decimal("60"))],
        ...     nonce=1590999849037,
        ... )
        >>> book.spread
        Decimal('0.00008')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    symbol: str = Field(..., min_length=1, description="Canonical symbol")
    bids: List[PriceLevel] = Field(
        default_factory=list,
        description="Bid levels, best first",
    )
    asks: List[PriceLevel] = Field(
        default_factory=list,
        description="Ask levels, best first",
    )
    nonce: Optional[int] = Field(
        default=None,
        description="Venue last-update id (lastUpdateId)",
    )
    timestamp: Optional[int] = Field(
        default=None,
        description="Snapshot time in milliseconds since epoch",
    )

    @property
    def datetime_utc(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        """
        Get the best (first) bid price.

        Returns:
            Optional[Decimal]: Best bid price, or None if no bids.
        """
        return self.bids[0].price if self.bids else None

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        """
        Get the best (first) ask price.

        Returns:
            Optional[Decimal]: Best ask price, or None if no asks.
        """
        return self.asks[0].price if self.asks else None

    @computed_field  # type: ignore[misc]
    @property
    def spread(self) -> Optional[Decimal]:
        """
        Calculate the absolute spread (best_ask - best_bid).

        Returns:
            Optional[Decimal]: Absolute spread, or None if either side is empty.
        """
        if self.best_bid is not None and self.best_ask is not None:
            return self.best_ask - self.best_bid
        return None

    def is_newer_than(self, other: "OrderBook") -> bool:
        """
        Check whether this snapshot supersedes ``other``.

        Snapshots without a nonce are never considered newer.
        """
        if self.nonce is None:
            return False
        if other.nonce is None:
            return True
        return self.nonce > other.nonce
