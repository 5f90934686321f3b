"""
Pydantic models for application configuration.

This module defines all configuration models that are validated when loading
the YAML configuration file. The models ensure type safety and provide the
venue defaults for every optional setting.

All fee rates use Decimal for precision to avoid floating-point errors.

Configuration file:
    - config/exchange.yaml: Venue endpoint, credentials, options and logging

Example:
    >>> from exchange_normalizer.config.models import AppConfig
    >>> config = AppConfig(exchange=ExchangeConfig())
    >>> config.exchange.options.recv_window_ms
    5000
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class TimeInForce(str, Enum):
    """Time-in-force applied to limit orders."""

    GTC = "GTC"  # Good till canceled
    IOC = "IOC"  # Immediate or cancel
    FOK = "FOK"  # Fill or kill


class OrderResponseType(str, Enum):
    """How much detail the venue returns from order placement."""

    ACK = "ACK"  # Order id only
    RESULT = "RESULT"  # Full order
    FULL = "FULL"  # Full order with fills


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class ConnectionSettings(BaseModel):
    """HTTP connection settings for the venue."""

    model_config = {"frozen": True, "extra": "forbid"}

    timeout_seconds: int = Field(
        default=10,
        description="Total request timeout",
        ge=1,
        le=120,
    )
    rate_limit_per_second: int = Field(
        default=2,
        description="Maximum REST requests per second (venue allows one per 500ms)",
        ge=1,
        le=100,
    )


class Credentials(BaseModel):
    """API credentials. Never printed in reprs or logs."""

    model_config = {"frozen": True, "extra": "forbid"}

    api_key: Optional[str] = Field(
        default=None,
        description="API key sent in the X-MBX-APIKEY header",
        repr=False,
    )
    secret: Optional[str] = Field(
        default=None,
        description="HMAC secret used to sign private requests",
        repr=False,
    )

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.secret)


class VenueOptions(BaseModel):
    """Behavioral options of the venue adapter."""

    model_config = {"frozen": True, "extra": "forbid"}

    default_time_in_force: TimeInForce = Field(
        default=TimeInForce.GTC,
        description="timeInForce sent with limit orders",
    )
    recv_window_ms: int = Field(
        default=5000,
        description="Maximum timestamp staleness accepted by the venue",
        ge=1,
        le=60000,
    )
    adjust_for_clock_skew: bool = Field(
        default=False,
        description="Measure local/venue clock offset when markets are loaded",
    )
    warn_on_open_orders_without_symbol: bool = Field(
        default=True,
        description="Refuse heavily rate-limited open-order queries across all symbols",
    )
    parse_order_to_precision: bool = Field(
        default=False,
        description="Round parsed order remaining/cost to market precision",
    )
    new_order_resp_type: Dict[str, OrderResponseType] = Field(
        default_factory=lambda: {
            "market": OrderResponseType.FULL,
            "limit": OrderResponseType.RESULT,
        },
        description="newOrderRespType per order type",
    )

    def response_type_for(self, order_type: str) -> OrderResponseType:
        """Return the response type for an order type, RESULT by default."""
        return self.new_order_resp_type.get(order_type.lower(), OrderResponseType.RESULT)


class FeeSchedule(BaseModel):
    """Static trading fee rates used for pre-trade estimates."""

    model_config = {"frozen": True, "extra": "forbid"}

    maker: Decimal = Field(
        default=Decimal("0.002"),
        description="Maker fee rate",
        ge=Decimal("0"),
    )
    taker: Decimal = Field(
        default=Decimal("0.002"),
        description="Taker fee rate",
        ge=Decimal("0"),
    )

    @field_validator("maker", "taker", mode="before")
    @classmethod
    def coerce_rate(cls, v: Any) -> Decimal:
        """Convert YAML floats to Decimal without binary noise."""
        if isinstance(v, (int, float)):
            return Decimal(str(v))
        return v


class ExchangeConfig(BaseModel):
    """Configuration for the venue connection."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(
        default="currencycom",
        description="Venue identifier used in logs and error messages",
        min_length=1,
    )
    rest_url: str = Field(
        default="https://api-adapter.backend.currency.com/api",
        description="REST API base URL",
    )
    api_version: str = Field(
        default="v1",
        description="REST API version path segment",
    )
    credentials: Credentials = Field(
        default_factory=Credentials,
        description="API credentials",
    )
    connection: ConnectionSettings = Field(
        default_factory=ConnectionSettings,
        description="Connection settings",
    )
    options: VenueOptions = Field(
        default_factory=VenueOptions,
        description="Adapter behavior options",
    )
    fees: FeeSchedule = Field(
        default_factory=FeeSchedule,
        description="Static trading fees",
    )

    @field_validator("rest_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def get_rest_url(self, path: str) -> str:
        """
        Build the full REST URL for an endpoint path.

        Args:
            path: Endpoint path without leading slash (e.g., "ticker/24hr").

        Returns:
            str: Absolute URL.
        """
        return f"{self.rest_url}/{self.api_version}/{path.lstrip('/')}"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Example:
        >>> config = load_config("config/exchange.yaml")
        >>> config.exchange.options.default_time_in_force
        <TimeInForce.GTC: 'GTC'>
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exchange: ExchangeConfig = Field(
        default_factory=ExchangeConfig,
        description="Venue configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
