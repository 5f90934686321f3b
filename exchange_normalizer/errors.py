"""
Error taxonomy shared by all venue adapters.

Every error carries:
    kind: ErrorKind used for pattern matching without isinstance chains.
    retryable: True when repeating the same request later may succeed.
    context: Originating operation and identifiers (symbol, order id, ...).
    raw: Raw venue body, when the error came from a response.

Hierarchy:
    VenueError
    ├── ExchangeError                  generic venue failure, not retryable
    │   ├── AuthenticationError
    │   ├── InsufficientFunds
    │   ├── InvalidOrder
    │   │   └── OrderNotFound
    │   ├── InvalidNonce
    │   └── DataError                  payload could not be understood
    ├── NetworkError                   retryable
    │   ├── ExchangeUnavailable
    │   ├── RateLimited
    │   └── RequestTimeout
    └── ArgumentError                  raised locally, before any request
        └── BadSymbol

Callers that prefer values over exceptions can wrap an operation with
``attempt()`` and inspect the returned Result.

Example:
    >>> result = await attempt(adapter.place_order("BTC/USD", "limit", "buy", amount))
    >>> if not result.ok and result.error.kind is ErrorKind.INSUFFICIENT_FUNDS:
    ...     print("top up first")
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Dict, Generic, Optional, Type, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Closed set of error categories."""

    EXCHANGE = "exchange"
    AUTHENTICATION = "authentication"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_ORDER = "invalid_order"
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_NONCE = "invalid_nonce"
    DATA = "data"
    NETWORK = "network"
    EXCHANGE_UNAVAILABLE = "exchange_unavailable"
    RATE_LIMITED = "rate_limited"
    REQUEST_TIMEOUT = "request_timeout"
    ARGUMENT = "argument"
    BAD_SYMBOL = "bad_symbol"


class VenueError(Exception):
    """
    Base class for every error raised by this package.

    Attributes:
        message: Human readable description.
        context: Operation name and identifiers the error relates to.
        raw: Raw response body, if any.
    """

    kind: ErrorKind = ErrorKind.EXCHANGE
    retryable: bool = False

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        raw: Optional[str] = None,
    ):
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        self.raw = raw
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ExchangeError(VenueError):
    """Generic venue-reported failure."""

    kind = ErrorKind.EXCHANGE


class AuthenticationError(ExchangeError):
    """Missing, malformed or rejected credentials or signature."""

    kind = ErrorKind.AUTHENTICATION


class InsufficientFunds(ExchangeError):
    """Account balance does not cover the requested action."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class InvalidOrder(ExchangeError):
    """Order rejected for its parameters (size, price, type)."""

    kind = ErrorKind.INVALID_ORDER


class OrderNotFound(InvalidOrder):
    """Referenced order does not exist or is no longer cancelable."""

    kind = ErrorKind.ORDER_NOT_FOUND


class InvalidNonce(ExchangeError):
    """Request timestamp outside the venue's receive window."""

    kind = ErrorKind.INVALID_NONCE


class DataError(ExchangeError):
    """Response payload is malformed."""

    kind = ErrorKind.DATA


class NetworkError(VenueError):
    """Transient transport-level failure."""

    kind = ErrorKind.NETWORK
    retryable = True


class ExchangeUnavailable(NetworkError):
    """Venue is down, in maintenance or returned an unknown server error."""

    kind = ErrorKind.EXCHANGE_UNAVAILABLE


class RateLimited(NetworkError):
    """Request rate exceeded (HTTP 418/429). Back off before retrying."""

    kind = ErrorKind.RATE_LIMITED


class RequestTimeout(NetworkError):
    """Request did not complete in time."""

    kind = ErrorKind.REQUEST_TIMEOUT


class ArgumentError(VenueError):
    """Invalid call arguments detected before contacting the venue."""

    kind = ErrorKind.ARGUMENT


class BadSymbol(ArgumentError):
    """Symbol is not present in the loaded market catalog."""

    kind = ErrorKind.BAD_SYMBOL


ERROR_CLASSES: Dict[ErrorKind, Type[VenueError]] = {
    cls.kind: cls
    for cls in (
        ExchangeError,
        AuthenticationError,
        InsufficientFunds,
        InvalidOrder,
        OrderNotFound,
        InvalidNonce,
        DataError,
        NetworkError,
        ExchangeUnavailable,
        RateLimited,
        RequestTimeout,
        ArgumentError,
        BadSymbol,
    )
}


@dataclass(frozen=True)
class ClassifiedError:
    """
    Outcome of classifying a venue response as a failure.

    Produced by the pure classification functions; converted into an
    exception at the adapter boundary with ``to_exception()``.
    """

    kind: ErrorKind
    message: str
    raw: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return ERROR_CLASSES[self.kind].retryable

    def to_exception(self) -> VenueError:
        error_class = ERROR_CLASSES[self.kind]
        return error_class(self.message, context=self.context, raw=self.raw)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a VenueError."""

    value: Optional[T] = None
    error: Optional[VenueError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def attempt(operation: Awaitable[T]) -> Result[T]:
    """
    Await ``operation`` and capture any VenueError in a Result.

    Exceptions outside the taxonomy (programming errors) still propagate.
    """
    try:
        return Result(value=await operation)
    except VenueError as e:
        return Result(error=e)
