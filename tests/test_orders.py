"""
Order normalizer tests: status mapping, derived quantities, fill
aggregation and status helpers.
"""

from decimal import Decimal

import pytest

from exchange_normalizer.adapters.currencycom.orders import (
    ORDER_STATUSES,
    normalize_order,
    normalize_orders,
    parse_order_status,
)
from exchange_normalizer.errors import DataError
from exchange_normalizer.models.order import (
    TERMINAL_STATUSES,
    OrderStatus,
    can_transition,
    is_terminal,
)

MARKET_ORDER = {
    "symbol": "BTC/USD_LEVERAGE",
    "orderId": "00000000-0000-0000-0000-0000000c0263",
    "clientOrderId": "00000000-0000-0000-0000-0000000c0263",
    "transactTime": 1589878206426,
    "price": "9825.66210000",
    "origQty": "0.03",
    "executedQty": "0.03",
    "status": "FILLED",
    "timeInForce": "FOK",
    "type": "MARKET",
    "side": "BUY",
    "fills": [
        {"price": "9807.05", "qty": "0.01", "commission": "0.1", "commissionAsset": "dUSD"},
        {"price": "9810.10", "qty": "0.015", "commission": "0.25", "commissionAsset": "dUSD"},
        {"price": "9811.00", "qty": "0.005", "commission": "0.05", "commissionAsset": "dUSD"},
    ],
}

CANCELED_ORDER = {
    "symbol": "ETH/USD",
    "orderId": "00000000-0000-0000-0000-00000024383b",
    "clientOrderId": "00000000-0000-0000-0000-00000024383b",
    "price": "150",
    "origQty": "0.1",
    "executedQty": "0.0",
    "status": "CANCELED",
    "timeInForce": "GTC",
    "type": "LIMIT",
    "side": "BUY",
}


class TestOrderStatus:
    """Tests for parse_order_status."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("NEW", "open"),
            ("PARTIALLY_FILLED", "open"),
            ("FILLED", "closed"),
            ("CANCELED", "canceled"),
            ("PENDING_CANCEL", "canceling"),
            ("REJECTED", "rejected"),
            ("EXPIRED", "expired"),
        ],
    )
    def test_known_statuses(self, raw, expected):
        assert parse_order_status(raw) == expected

    def test_table_is_total_over_canonical_values(self):
        canonical = {status.value for status in OrderStatus}
        assert set(ORDER_STATUSES.values()) == canonical

    def test_unknown_status_passes_through(self):
        assert parse_order_status("SUSPENDED") == "SUSPENDED"
        assert parse_order_status(None) is None


class TestStatusHelpers:
    """Tests for the terminal set and transition table."""

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {"closed", "canceled", "rejected", "expired"}
        assert is_terminal("closed")
        assert not is_terminal("open")
        assert not is_terminal("SUSPENDED")

    def test_transitions(self):
        assert can_transition("open", "closed")
        assert can_transition("open", "canceling")
        assert can_transition("canceling", "canceled")
        assert not can_transition("closed", "open")
        assert not can_transition("canceled", "canceled")
        assert not can_transition("SUSPENDED", "open")
        assert not can_transition(None, "open")


class TestNormalizeOrder:
    """Tests for normalize_order."""

    def test_basic_fields(self, catalog):
        order = normalize_order(CANCELED_ORDER, catalog)

        assert order.id == "00000000-0000-0000-0000-00000024383b"
        assert order.client_order_id == "00000000-0000-0000-0000-00000024383b"
        assert order.symbol == "ETH/USD"
        assert order.type == "limit"
        assert order.side == "buy"
        assert order.status == "canceled"
        assert order.time_in_force == "GTC"
        assert order.price == Decimal("150")
        assert order.amount == Decimal("0.1")
        assert order.filled == Decimal("0.0")
        assert order.remaining == Decimal("0.1")
        assert order.timestamp is None
        assert order.trades is None
        assert order.fee is None
        assert order.is_terminal

    def test_cost_falls_back_to_price_times_filled(self, catalog):
        order = normalize_order(CANCELED_ORDER, catalog)
        assert order.cost == Decimal("0")

    def test_average_undefined_when_nothing_filled(self, catalog):
        order = normalize_order(CANCELED_ORDER, catalog)
        assert order.average is None

    def test_timestamp_prefers_time(self, catalog):
        raw = dict(CANCELED_ORDER, time=1, transactTime=2)
        assert normalize_order(raw, catalog).timestamp == 1
        raw = dict(CANCELED_ORDER, transactTime=2)
        assert normalize_order(raw, catalog).timestamp == 2

    def test_remaining_clamped_at_zero(self, catalog):
        raw = dict(CANCELED_ORDER, origQty="1", executedQty="1.5")
        order = normalize_order(raw, catalog)
        assert order.remaining == Decimal(0)

    def test_market_zero_price_backfill(self, catalog):
        raw = {
            "symbol": "ETH/USD",
            "type": "MARKET",
            "side": "SELL",
            "price": "0",
            "origQty": "10",
            "executedQty": "10",
            "cummulativeQuoteQty": "100",
            "status": "FILLED",
        }
        order = normalize_order(raw, catalog)
        assert order.price == Decimal(10)
        assert order.cost == Decimal(100)
        assert order.average == Decimal(10)

    def test_limit_zero_price_not_backfilled(self, catalog):
        raw = {
            "symbol": "ETH/USD",
            "type": "LIMIT",
            "price": "0",
            "origQty": "10",
            "executedQty": "10",
            "cummulativeQuoteQty": "100",
        }
        assert normalize_order(raw, catalog).price == Decimal(0)

    def test_fill_aggregation_is_exact(self, catalog):
        order = normalize_order(MARKET_ORDER, catalog)

        expected_cost = sum(
            Decimal(fill["price"]) * Decimal(fill["qty"]) for fill in MARKET_ORDER["fills"]
        )
        expected_fee = sum(Decimal(fill["commission"]) for fill in MARKET_ORDER["fills"])

        assert len(order.trades) == 3
        assert order.cost == expected_cost
        assert order.cost == sum(trade.cost for trade in order.trades)
        assert order.fee.cost == expected_fee
        assert order.fee.cost == Decimal("0.40")
        assert order.fee.currency == "DUSD"
        assert order.average == expected_cost / Decimal("0.03")
        assert order.timestamp == 1589878206426
        assert order.status == "closed"

    def test_fills_inherit_order_market(self, catalog):
        order = normalize_order(MARKET_ORDER, catalog)
        assert {trade.symbol for trade in order.trades} == {"BTC/USD_LEVERAGE"}

    def test_fee_currency_from_first_fill(self, catalog):
        raw = dict(MARKET_ORDER)
        raw["fills"] = [
            {"price": "1", "qty": "1", "commission": "0.1", "commissionAsset": "USD"},
            {"price": "1", "qty": "1", "commission": "0.2", "commissionAsset": "BTC"},
        ]
        order = normalize_order(raw, catalog)
        assert order.fee.currency == "USD"
        assert order.fee.cost == Decimal("0.3")

    def test_empty_fills_keep_reported_cost(self, catalog):
        raw = dict(MARKET_ORDER, fills=[], cummulativeQuoteQty="294.5")
        order = normalize_order(raw, catalog)
        assert order.trades == []
        assert order.cost == Decimal("294.5")
        assert order.fee is None

    def test_requested_market_used_when_symbol_unknown(self, catalog):
        raw = dict(CANCELED_ORDER, symbol="UNLISTED")
        order = normalize_order(raw, catalog, catalog.market("EVK"))
        assert order.symbol == "EVK/EUR"

    def test_parse_to_precision(self, catalog):
        raw = {
            "symbol": "ETH/USD",
            "type": "LIMIT",
            "price": "3.333",
            "origQty": "1.239",
            "executedQty": "0.5",
            "status": "PARTIALLY_FILLED",
        }
        plain = normalize_order(raw, catalog)
        assert plain.remaining == Decimal("0.739")
        assert plain.cost == Decimal("1.6665")

        rounded = normalize_order(raw, catalog, parse_to_precision=True)
        assert rounded.remaining == Decimal("0.73")
        assert rounded.cost == Decimal("1.67")
        assert rounded.average == Decimal("1.6665") / Decimal("0.5")

    def test_not_an_object(self, catalog):
        with pytest.raises(DataError):
            normalize_order(["order"], catalog)


class TestNormalizeOrders:
    def test_list(self, catalog):
        orders = normalize_orders([CANCELED_ORDER, MARKET_ORDER], catalog)
        assert [o.symbol for o in orders] == ["ETH/USD", "BTC/USD_LEVERAGE"]

    def test_not_a_list(self, catalog):
        with pytest.raises(DataError):
            normalize_orders(CANCELED_ORDER, catalog)
