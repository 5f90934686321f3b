"""
Account-level models: balances, accounts and fees.

Models:
    BalanceEntry: Free/used/total amounts for one currency
    Balance: All balance entries keyed by currency code
    Account: Venue sub-account holding one currency
    TradingFees: Account maker/taker commission
    FeeQuote: Pre-trade fee estimate
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field


class BalanceEntry(BaseModel):
    """
    Balance of one currency.

    Attributes:
        currency: Normalized currency code.
        free: Available for trading.
        used: Locked in open orders or positions.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    currency: str = Field(..., min_length=1)
    free: Optional[Decimal] = None
    used: Optional[Decimal] = None

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> Optional[Decimal]:
        """
        Sum of free and used.

        Returns:
            Optional[Decimal]: Total, or None when either part is unknown.
        """
        if self.free is None or self.used is None:
            return None
        return self.free + self.used


class Balance(BaseModel):
    """
    Account balances keyed by normalized currency code.

    Example:
        >>> balance["ETH"].free
        Decimal('0.5')
        >>> balance.free
        {'ETH': Decimal('0.5')}
    """

    model_config = {"frozen": True, "extra": "forbid"}

    entries: Dict[str, BalanceEntry] = Field(default_factory=dict)
    info: Dict[str, Any] = Field(default_factory=dict)

    def __getitem__(self, currency: str) -> BalanceEntry:
        return self.entries[currency]

    def __contains__(self, currency: object) -> bool:
        return currency in self.entries

    def currencies(self) -> list[str]:
        return list(self.entries)

    @property
    def free(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.free for code, entry in self.entries.items()}

    @property
    def used(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.used for code, entry in self.entries.items()}

    @property
    def total(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.total for code, entry in self.entries.items()}


class Account(BaseModel):
    """Venue account; the venue keeps one account per currency."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[int] = None
    type: Optional[str] = None
    currency: Optional[str] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class TradingFees(BaseModel):
    """Account commission rates as reported by the venue."""

    model_config = {"frozen": True, "extra": "forbid"}

    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class FeeQuote(BaseModel):
    """
    Pre-trade fee estimate.

    Attributes:
        type: "maker" or "taker".
        currency: Currency the fee is charged in.
        rate: Static per-market rate.
        cost: Estimated fee, rounded to the relevant precision.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    type: str
    currency: Optional[str] = None
    rate: Optional[Decimal] = None
    cost: Optional[Decimal] = None
