"""
Tolerant field extraction for raw venue payloads.

Venue JSON is loosely typed: the same field may arrive as a string
("0.02477"), a JSON number (0.02477) or be missing entirely. These helpers
return None instead of raising so normalizers can describe optional fields
declaratively.

Numbers are converted to Decimal through ``str`` so a JSON float keeps the
digits the venue printed rather than its binary approximation.

Example:
    >>> safe_decimal({"lastPrice": "0.02477"}, "lastPrice")
    Decimal('0.02477')
    >>> safe_decimal({"free": 0.5}, "free")
    Decimal('0.5')
    >>> safe_integer({"closeTime": "1591000072693"}, "closeTime")
    1591000072693
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

Container = Union[Dict[str, Any], Sequence[Any]]

# Currency aliases applied to every venue asset id.
COMMON_CURRENCIES: Dict[str, str] = {
    "XBT": "BTC",
    "BCC": "BCH",
    "BCHABC": "BCH",
    "BCHSV": "BSV",
    "DRK": "DASH",
}


def safe_value(container: Optional[Container], key: Any, default: Any = None) -> Any:
    """
    Return ``container[key]`` or ``default`` when absent or None.

    Works for both mappings (string keys) and sequences (integer indexes).
    """
    if container is None:
        return default
    try:
        value = container[key]
    except (KeyError, IndexError, TypeError):
        return default
    return default if value is None else value


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw JSON scalar to Decimal.

    Args:
        value: String, int, float, Decimal or None.

    Returns:
        Optional[Decimal]: Parsed value, or None for missing, boolean,
            empty or unparsable input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        text = str(value).strip()
        if not text:
            return None
        return Decimal(text)
    except (InvalidOperation, ValueError):
        return None


def safe_string(container: Optional[Container], key: Any, default: Optional[str] = None) -> Optional[str]:
    value = safe_value(container, key)
    if value is None:
        return default
    if isinstance(value, float):
        return repr(value)
    return str(value)


def safe_string_lower(
    container: Optional[Container], key: Any, default: Optional[str] = None
) -> Optional[str]:
    value = safe_string(container, key, default)
    return value.lower() if value is not None else None


def safe_string_2(
    container: Optional[Container], key1: Any, key2: Any, default: Optional[str] = None
) -> Optional[str]:
    """Return the first of two keys that holds a value, as a string."""
    value = safe_string(container, key1)
    if value is None:
        value = safe_string(container, key2, default)
    return value


def safe_integer(container: Optional[Container], key: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Extract an integer, accepting numeric strings and whole-valued floats.

    Returns:
        Optional[int]: Parsed integer or ``default``.
    """
    number = to_decimal(safe_value(container, key))
    if number is None or not number.is_finite():
        return default
    return int(number)


def safe_integer_2(
    container: Optional[Container], key1: Any, key2: Any, default: Optional[int] = None
) -> Optional[int]:
    value = safe_integer(container, key1)
    if value is None:
        value = safe_integer(container, key2, default)
    return value


def safe_decimal(
    container: Optional[Container], key: Any, default: Optional[Decimal] = None
) -> Optional[Decimal]:
    number = to_decimal(safe_value(container, key))
    return default if number is None else number


def safe_decimal_2(
    container: Optional[Container], key1: Any, key2: Any, default: Optional[Decimal] = None
) -> Optional[Decimal]:
    value = safe_decimal(container, key1)
    if value is None:
        value = safe_decimal(container, key2, default)
    return value


def safe_currency_code(currency_id: Optional[str]) -> Optional[str]:
    """
    Normalize a venue asset id to a common currency code.

    Upper-cases the id and applies the COMMON_CURRENCIES alias table.

    Example:
        >>> safe_currency_code("xbt")
        'BTC'
    """
    if currency_id is None:
        return None
    code = currency_id.upper()
    return COMMON_CURRENCIES.get(code, code)


def index_by(items: Iterable[Dict[str, Any]], key: str) -> Dict[Any, Dict[str, Any]]:
    """Index a list of dicts by one of their fields; later entries win."""
    result: Dict[Any, Dict[str, Any]] = {}
    for item in items:
        if isinstance(item, dict) and key in item:
            result[item[key]] = item
    return result


def filter_by_since_limit(
    items: List[T],
    since: Optional[int] = None,
    limit: Optional[int] = None,
    key: str = "timestamp",
) -> List[T]:
    """
    Keep items at or after ``since`` and cap the result at ``limit``.

    Input order is preserved. Items without a timestamp are dropped only
    when ``since`` is given.
    """
    result = items
    if since is not None:
        result = [
            item
            for item in result
            if getattr(item, key, None) is not None and getattr(item, key) >= since
        ]
    if limit is not None:
        result = result[:limit]
    return list(result)


def filter_by_symbols(items: List[T], symbols: Optional[Iterable[str]] = None) -> List[T]:
    """Keep items whose ``symbol`` is in ``symbols``; None keeps everything."""
    if symbols is None:
        return list(items)
    wanted = set(symbols)
    return [item for item in items if getattr(item, "symbol", None) in wanted]
