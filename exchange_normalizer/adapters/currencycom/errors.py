"""
Currency.com response classification.

Error body format:
    {"code": -1013, "msg": "Invalid quantity."}

Envelope format (the message may itself be a JSON-encoded error):
    {"success": false, "msg": "{\"code\": -2010, \"msg\": \"...\"}"}

Rules, first match wins:
    1. HTTP 418/429                      -> RateLimited
    2. Known substrings in a >=400 body  -> InvalidOrder
    3. success:false with a JSON ``msg`` -> continue with the nested object
    4. Exact message or numeric code     -> mapped kind
    5. success:false otherwise           -> ExchangeError with the raw body
    6. HTTP status fallback              -> Auth / Unavailable / Timeout / ExchangeError
"""

import json
from typing import Any, Dict, Optional, Tuple

from exchange_normalizer.errors import ClassifiedError, ErrorKind
from exchange_normalizer.utils.safe import safe_integer, safe_string, safe_value

RATE_LIMIT_STATUSES = frozenset({418, 429})

EXACT_MESSAGES: Dict[str, ErrorKind] = {
    "FIELD_VALIDATION_ERROR Cancel is available only for LIMIT order": ErrorKind.INVALID_ORDER,
    "API key does not exist": ErrorKind.AUTHENTICATION,
    "Order would trigger immediately.": ErrorKind.INVALID_ORDER,
    "Account has insufficient balance for requested action.": ErrorKind.INSUFFICIENT_FUNDS,
    "Rest API trading is not enabled.": ErrorKind.EXCHANGE_UNAVAILABLE,
}

ERROR_CODES: Dict[int, ErrorKind] = {
    -1000: ErrorKind.EXCHANGE_UNAVAILABLE,  # unknown error while processing the request
    -1013: ErrorKind.INVALID_ORDER,  # invalid quantity/price, MIN_NOTIONAL
    -1021: ErrorKind.INVALID_NONCE,  # timestamp outside recvWindow
    -1022: ErrorKind.AUTHENTICATION,  # signature not valid
    -1100: ErrorKind.INVALID_ORDER,  # illegal characters in parameter
    -1104: ErrorKind.EXCHANGE,  # not all sent parameters were read
    -1128: ErrorKind.EXCHANGE,  # invalid combination of optional parameters
    -2010: ErrorKind.EXCHANGE,  # generic order rejection
    -2011: ErrorKind.ORDER_NOT_FOUND,  # UNKNOWN_ORDER on cancel
    -2013: ErrorKind.ORDER_NOT_FOUND,  # order does not exist
    -2014: ErrorKind.AUTHENTICATION,  # API-key format invalid
    -2015: ErrorKind.AUTHENTICATION,  # invalid API-key, IP, or permissions
}

BODY_SUBSTRINGS: Tuple[Tuple[str, ErrorKind, str], ...] = (
    (
        "Price * QTY is zero or less",
        ErrorKind.INVALID_ORDER,
        "order cost = amount * price is zero or less",
    ),
    (
        "LOT_SIZE",
        ErrorKind.INVALID_ORDER,
        "order amount should be evenly divisible by lot size",
    ),
    (
        "PRICE_FILTER",
        ErrorKind.INVALID_ORDER,
        "order price is invalid: exceeds allowed precision or price limits",
    ),
)


def _status_fallback(status: int) -> Optional[ErrorKind]:
    if status in (401, 403):
        return ErrorKind.AUTHENTICATION
    if status == 504:
        return ErrorKind.REQUEST_TIMEOUT
    if status in (404, 409) or status >= 500:
        return ErrorKind.EXCHANGE_UNAVAILABLE
    if status >= 400:
        return ErrorKind.EXCHANGE
    return None


def _lookup(response: Any) -> Tuple[Optional[str], Optional[ErrorKind]]:
    if not isinstance(response, dict):
        return None, None
    message = safe_string(response, "msg")
    if message is not None and message in EXACT_MESSAGES:
        return message, EXACT_MESSAGES[message]
    code = safe_integer(response, "code")
    if code is not None and code in ERROR_CODES:
        return message, ERROR_CODES[code]
    return message, None


def classify_response(
    status: int,
    reason: str,
    body: str,
    parsed: Any,
    exchange_name: str = "currencycom",
    context: Optional[Dict[str, Any]] = None,
) -> Optional[ClassifiedError]:
    """
    Classify one venue response.

    Pure function: it never raises and never performs I/O.

    Args:
        status: HTTP status code.
        reason: HTTP reason phrase.
        body: Raw response text.
        parsed: Parsed JSON body, or None.
        exchange_name: Venue name prefixed to messages.
        context: Operation context attached to the result.

    Returns:
        Optional[ClassifiedError]: The failure, or None for a usable response.

    Example:
        >>> classify_response(429, "Too Many Requests", "", None).kind
        <ErrorKind.RATE_LIMITED: 'rate_limited'>
    """
    context = dict(context or {})
    context["status"] = status
    body = body or ""

    def classified(kind: ErrorKind, message: str) -> ClassifiedError:
        return ClassifiedError(
            kind=kind,
            message=f"{exchange_name} {message}",
            raw=body,
            context=context,
        )

    if status in RATE_LIMIT_STATUSES:
        return classified(ErrorKind.RATE_LIMITED, f"{status} {reason} {body}".strip())

    if status >= 400:
        for needle, kind, explanation in BODY_SUBSTRINGS:
            if needle in body:
                return classified(kind, f"{explanation} {body}")

    response = parsed
    success = True
    if isinstance(response, dict):
        success = safe_value(response, "success", True) not in (False, "false")
        if not success:
            message = safe_string(response, "msg")
            if message is not None:
                try:
                    nested = json.loads(message)
                except ValueError:
                    nested = None
                if isinstance(nested, dict):
                    response = nested

    message, kind = _lookup(response)
    if kind is not None:
        return classified(kind, message or body)

    if not success:
        return classified(ErrorKind.EXCHANGE, body)

    kind = _status_fallback(status)
    if kind is not None:
        return classified(kind, f"{status} {reason} {body}".strip())

    return None
