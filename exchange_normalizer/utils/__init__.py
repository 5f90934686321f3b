"""
Generic helpers shared by every venue adapter.

Modules:
    safe: Tolerant field extraction from raw JSON payloads
    precision: Step-size precision and decimal rounding/truncation
"""

from exchange_normalizer.utils.precision import (
    ROUND,
    TRUNCATE,
    decimal_to_precision,
    precision_from_string,
)
from exchange_normalizer.utils.safe import (
    filter_by_since_limit,
    filter_by_symbols,
    index_by,
    safe_currency_code,
    safe_decimal,
    safe_decimal_2,
    safe_integer,
    safe_integer_2,
    safe_string,
    safe_string_2,
    safe_string_lower,
    safe_value,
    to_decimal,
)

__all__: list[str] = [
    "ROUND",
    "TRUNCATE",
    "decimal_to_precision",
    "precision_from_string",
    "filter_by_since_limit",
    "filter_by_symbols",
    "index_by",
    "safe_currency_code",
    "safe_decimal",
    "safe_decimal_2",
    "safe_integer",
    "safe_integer_2",
    "safe_string",
    "safe_string_2",
    "safe_string_lower",
    "safe_value",
    "to_decimal",
]
