"""
Abstract interfaces for the venue adapters.

This module defines the abstract base classes that all implementations
must follow:

    ExchangeAdapter: Upward contract every venue adapter implements
    Transport: HTTP boundary the adapters consume

Example:
    >>> from exchange_normalizer.interfaces import ExchangeAdapter
    >>> class MyVenueAdapter(ExchangeAdapter):
    ...     @property
    ...     def exchange_name(self) -> str:
    ...         return "myvenue"
    ...     # ... implement other abstract methods

Modules:
    exchange_adapter: ExchangeAdapter ABC
    transport: Transport ABC and RawResponse
"""

from exchange_normalizer.interfaces.exchange_adapter import ExchangeAdapter
from exchange_normalizer.interfaces.transport import RawResponse, Transport

__all__: list[str] = [
    "ExchangeAdapter",
    "RawResponse",
    "Transport",
]
