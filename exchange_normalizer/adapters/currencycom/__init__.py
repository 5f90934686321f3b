"""
Currency.com venue adapter module.

This module provides complete REST integration with Currency.com for both
spot and leverage (margin) markets. It implements the ExchangeAdapter
interface and handles request signing, error classification and data
normalization.

Components:
    CurrencyComAdapter: Main adapter implementing ExchangeAdapter interface
    CurrencyComRestClient: aiohttp transport
    CurrencyComNormalizer: Market data normalization utilities
    MarketCatalog: Immutable instrument snapshot
    RequestSigner: HMAC-SHA256 request signing

Example:
    >>> from exchange_normalizer.adapters.currencycom import CurrencyComAdapter
    >>> async with CurrencyComAdapter(exchange_config) as adapter:
    ...     ticker = await adapter.get_ticker("BTC/USD_LEVERAGE")
    ...     print(ticker.last)
"""

from exchange_normalizer.adapters.currencycom.adapter import TIMEFRAMES, CurrencyComAdapter
from exchange_normalizer.adapters.currencycom.catalog import (
    MarketCatalog,
    build_instrument,
    build_instruments,
)
from exchange_normalizer.adapters.currencycom.errors import classify_response
from exchange_normalizer.adapters.currencycom.fees import calculate_fee
from exchange_normalizer.adapters.currencycom.normalizer import (
    CurrencyComNormalizer,
    RawTradeShape,
    detect_trade_shape,
    infer_trade_side,
)
from exchange_normalizer.adapters.currencycom.orders import (
    ORDER_STATUSES,
    normalize_order,
    normalize_orders,
    parse_order_status,
)
from exchange_normalizer.adapters.currencycom.rest import CurrencyComRestClient
from exchange_normalizer.adapters.currencycom.signer import RequestSigner, SignedRequest

__all__ = [
    "CurrencyComAdapter",
    "CurrencyComRestClient",
    "CurrencyComNormalizer",
    "MarketCatalog",
    "RequestSigner",
    "SignedRequest",
    "ORDER_STATUSES",
    "RawTradeShape",
    "TIMEFRAMES",
    "build_instrument",
    "build_instruments",
    "calculate_fee",
    "classify_response",
    "detect_trade_shape",
    "infer_trade_side",
    "normalize_order",
    "normalize_orders",
    "parse_order_status",
]
