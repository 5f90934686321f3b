"""
Error taxonomy and response classifier tests.
"""

import json

import pytest

from exchange_normalizer.adapters.currencycom.errors import classify_response
from exchange_normalizer.errors import (
    ArgumentError,
    AuthenticationError,
    BadSymbol,
    ClassifiedError,
    ErrorKind,
    ExchangeError,
    ExchangeUnavailable,
    InsufficientFunds,
    InvalidOrder,
    NetworkError,
    OrderNotFound,
    RateLimited,
    Result,
    attempt,
)


def classify(status, payload=None, body=None, reason="", context=None):
    text = body if body is not None else json.dumps(payload)
    return classify_response(status, reason, text, payload, "currencycom", context)


class TestTaxonomy:
    """Tests for the error classes."""

    def test_retryable_flags(self):
        assert RateLimited("x").retryable
        assert ExchangeUnavailable("x").retryable
        assert not ExchangeError("x").retryable
        assert not InvalidOrder("x").retryable
        assert not ArgumentError("x").retryable

    def test_hierarchy(self):
        assert issubclass(OrderNotFound, InvalidOrder)
        assert issubclass(RateLimited, NetworkError)
        assert issubclass(BadSymbol, ArgumentError)
        assert not issubclass(ArgumentError, ExchangeError)

    def test_context_in_message(self):
        error = InvalidOrder("rejected", context={"operation": "place_order", "symbol": "ETH/USD"})
        assert str(error) == "rejected (operation=place_order, symbol=ETH/USD)"
        assert error.kind is ErrorKind.INVALID_ORDER

    def test_classified_error_to_exception(self):
        classified = ClassifiedError(
            kind=ErrorKind.ORDER_NOT_FOUND,
            message="gone",
            raw="{}",
            context={"order_id": "1"},
        )
        error = classified.to_exception()
        assert isinstance(error, OrderNotFound)
        assert error.raw == "{}"
        assert error.context == {"order_id": "1"}
        assert not classified.retryable


class TestResult:
    """Tests for Result and attempt."""

    @pytest.mark.asyncio
    async def test_attempt_success(self):
        async def operation():
            return 42

        result = await attempt(operation())
        assert result.ok
        assert result.unwrap() == 42

    @pytest.mark.asyncio
    async def test_attempt_captures_venue_error(self):
        async def operation():
            raise InsufficientFunds("no money", context={"symbol": "ETH/USD"})

        result = await attempt(operation())
        assert not result.ok
        assert result.error.kind is ErrorKind.INSUFFICIENT_FUNDS
        with pytest.raises(InsufficientFunds):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_attempt_propagates_programming_errors(self):
        async def operation():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            await attempt(operation())

    def test_result_defaults(self):
        assert Result().ok


class TestRateLimit:
    @pytest.mark.parametrize("status", [418, 429])
    def test_rate_limit_regardless_of_body(self, status):
        for payload in (None, {"code": -2011, "msg": "UNKNOWN_ORDER"}, {"success": False}):
            result = classify(status, payload)
            assert result.kind is ErrorKind.RATE_LIMITED
            assert result.retryable

    def test_rate_limit_beats_substrings(self):
        result = classify(429, body="Price * QTY is zero or less")
        assert result.kind is ErrorKind.RATE_LIMITED


class TestBodySubstrings:
    @pytest.mark.parametrize("status", [400, 403, 500])
    def test_zero_cost_is_invalid_order(self, status):
        body = '{"code":-1013,"msg":"Price * QTY is zero or less."}'
        result = classify(status, body=body, payload=json.loads(body))
        assert result.kind is ErrorKind.INVALID_ORDER
        assert result.raw == body

    @pytest.mark.parametrize("needle", ["LOT_SIZE", "PRICE_FILTER"])
    def test_filter_violations(self, needle):
        body = f'{{"code":-1013,"msg":"Filter failure: {needle}"}}'
        assert classify(400, body=body).kind is ErrorKind.INVALID_ORDER

    def test_substrings_ignored_below_400(self):
        assert classify(200, {"note": "LOT_SIZE"}) is None


class TestEnvelope:
    def test_nested_json_message(self):
        nested = json.dumps({"code": -2013, "msg": "Order does not exist."})
        result = classify(200, {"success": False, "msg": nested})
        assert result.kind is ErrorKind.ORDER_NOT_FOUND

    def test_nested_exact_message(self):
        nested = json.dumps({"msg": "Account has insufficient balance for requested action."})
        result = classify(200, {"success": False, "msg": nested})
        assert result.kind is ErrorKind.INSUFFICIENT_FUNDS

    def test_unparsable_message_used_as_is(self):
        result = classify(200, {"success": False, "msg": "API key does not exist"})
        assert result.kind is ErrorKind.AUTHENTICATION

    def test_unmatched_failure_is_generic(self):
        payload = {"success": False, "msg": "Something odd"}
        result = classify(200, payload)
        assert result.kind is ErrorKind.EXCHANGE
        assert result.raw == json.dumps(payload)
        assert "Something odd" in result.message

    def test_string_false_is_failure(self):
        result = classify(200, {"success": "false", "msg": "Something odd"})
        assert result.kind is ErrorKind.EXCHANGE

    def test_string_true_is_success(self):
        assert classify(200, {"success": "true", "data": []}) is None


class TestLookup:
    @pytest.mark.parametrize(
        "code, kind",
        [
            (-1000, ErrorKind.EXCHANGE_UNAVAILABLE),
            (-1013, ErrorKind.INVALID_ORDER),
            (-1021, ErrorKind.INVALID_NONCE),
            (-1022, ErrorKind.AUTHENTICATION),
            (-1100, ErrorKind.INVALID_ORDER),
            (-1104, ErrorKind.EXCHANGE),
            (-1128, ErrorKind.EXCHANGE),
            (-2010, ErrorKind.EXCHANGE),
            (-2011, ErrorKind.ORDER_NOT_FOUND),
            (-2013, ErrorKind.ORDER_NOT_FOUND),
            (-2014, ErrorKind.AUTHENTICATION),
            (-2015, ErrorKind.AUTHENTICATION),
        ],
    )
    def test_error_codes(self, code, kind):
        assert classify(400, {"code": code, "msg": "whatever"}).kind is kind

    @pytest.mark.parametrize(
        "message, kind",
        [
            ("FIELD_VALIDATION_ERROR Cancel is available only for LIMIT order", ErrorKind.INVALID_ORDER),
            ("API key does not exist", ErrorKind.AUTHENTICATION),
            ("Order would trigger immediately.", ErrorKind.INVALID_ORDER),
            ("Account has insufficient balance for requested action.", ErrorKind.INSUFFICIENT_FUNDS),
            ("Rest API trading is not enabled.", ErrorKind.EXCHANGE_UNAVAILABLE),
        ],
    )
    def test_exact_messages(self, message, kind):
        assert classify(400, {"code": -2010, "msg": message}).kind is kind

    def test_message_must_match_exactly(self):
        result = classify(400, {"msg": "API key does not exist!"})
        assert result.kind is ErrorKind.EXCHANGE


class TestStatusFallback:
    @pytest.mark.parametrize(
        "status, kind",
        [
            (401, ErrorKind.AUTHENTICATION),
            (403, ErrorKind.AUTHENTICATION),
            (404, ErrorKind.EXCHANGE_UNAVAILABLE),
            (409, ErrorKind.EXCHANGE_UNAVAILABLE),
            (500, ErrorKind.EXCHANGE_UNAVAILABLE),
            (502, ErrorKind.EXCHANGE_UNAVAILABLE),
            (504, ErrorKind.REQUEST_TIMEOUT),
            (400, ErrorKind.EXCHANGE),
        ],
    )
    def test_status_codes(self, status, kind):
        assert classify(status, body="<html>error</html>").kind is kind

    def test_success_passes_through(self):
        assert classify(200, {"serverTime": 1}) is None
        assert classify(200, [{"symbol": "ETH/USD"}]) is None

    def test_context_attached(self):
        result = classify(503, body="", context={"operation": "get_ticker", "symbol": "ETH/USD"})
        assert result.context == {"operation": "get_ticker", "symbol": "ETH/USD", "status": 503}
        assert result.message.startswith("currencycom ")
