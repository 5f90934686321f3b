"""
Order data models and the canonical order status set.

Orders are snapshots: every fetch produces a fresh Order and nothing in this
package tracks how an order moves between statuses over time. The
transition table below documents which moves are meaningful so that callers
who do track orders can validate what they observe.

Status lifecycle:

    open ──┬──► closed
           ├──► canceling ──► canceled
           ├──► canceled
           ├──► rejected
           └──► expired

    closed, canceled, rejected and expired are terminal.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field

from exchange_normalizer.models.trade import Fee, Trade


class OrderStatus(str, Enum):
    """Canonical order statuses."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    CANCELING = "canceling"
    REJECTED = "rejected"
    EXPIRED = "expired"


TERMINAL_STATUSES: FrozenSet[str] = frozenset(
    {
        OrderStatus.CLOSED.value,
        OrderStatus.CANCELED.value,
        OrderStatus.REJECTED.value,
        OrderStatus.EXPIRED.value,
    }
)

ORDER_STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    OrderStatus.OPEN.value: frozenset(
        {
            OrderStatus.CLOSED.value,
            OrderStatus.CANCELED.value,
            OrderStatus.CANCELING.value,
            OrderStatus.REJECTED.value,
            OrderStatus.EXPIRED.value,
        }
    ),
    OrderStatus.CANCELING.value: frozenset({OrderStatus.CANCELED.value}),
    OrderStatus.CLOSED.value: frozenset(),
    OrderStatus.CANCELED.value: frozenset(),
    OrderStatus.REJECTED.value: frozenset(),
    OrderStatus.EXPIRED.value: frozenset(),
}


def is_terminal(status: Optional[str]) -> bool:
    """Check whether a canonical status can no longer change."""
    return status in TERMINAL_STATUSES


def can_transition(from_status: Optional[str], to_status: Optional[str]) -> bool:
    """
    Check whether moving from one canonical status to another is meaningful.

    Statuses outside the canonical set are unknown, so any move involving
    them is reported as not meaningful rather than raising.
    """
    if from_status is None or to_status is None:
        return False
    return to_status in ORDER_STATUS_TRANSITIONS.get(from_status, frozenset())


class Order(BaseModel):
    """
    Normalized order snapshot.

    Attributes:
        id: Venue order id.
        client_order_id: Client-assigned order id, when echoed back.
        timestamp: Order time (``time`` or ``transactTime``) in milliseconds.
        symbol: Canonical symbol.
        type: Lower-cased order type ("limit", "market", ...).
        side: Lower-cased side ("buy"/"sell").
        price: Limit price; back-filled with cost / filled for market orders
            that report a zero price.
        amount: Requested quantity.
        filled: Executed quantity.
        remaining: max(amount - filled, 0).
        cost: Executed notional; sum of fill costs when fills are present.
        average: cost / filled, when filled is non-zero.
        status: Canonical status, or the raw venue value when unrecognized.
        time_in_force: Venue time-in-force code.
        fee: Aggregated commission over fills.
        trades: Parsed fills.
        info: Raw venue record.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    client_order_id: Optional[str] = None
    timestamp: Optional[int] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    average: Optional[Decimal] = None
    status: Optional[str] = None
    time_in_force: Optional[str] = None
    fee: Optional[Fee] = None
    trades: Optional[List[Trade]] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def datetime_utc(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)
