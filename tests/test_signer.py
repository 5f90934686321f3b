"""Request signer tests."""

import hashlib
import hmac
from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

import pytest

from exchange_normalizer.adapters.currencycom.signer import (
    API_KEY_HEADER,
    FORM_CONTENT_TYPE,
    PRIVATE,
    PUBLIC,
    RequestSigner,
    encode_params,
    hmac_sha256_hex,
)
from exchange_normalizer.config.models import ExchangeConfig, TimeInForce, VenueOptions
from exchange_normalizer.errors import AuthenticationError

NOW = 1590998061253


@pytest.fixture
def signer(config):
    return RequestSigner(config, clock=lambda: NOW)


class TestEncoding:
    def test_hmac_matches_stdlib(self):
        expected = hmac.new(b"secret", b"a=1&b=2", hashlib.sha256).hexdigest()
        assert hmac_sha256_hex("a=1&b=2", "secret") == expected

    def test_encode_params(self):
        query = encode_params(
            {
                "symbol": "BTC/USD",
                "quantity": Decimal("0.010"),
                "reduceOnly": False,
                "timeInForce": TimeInForce.IOC,
                "skip": None,
            }
        )
        assert query == "symbol=BTC%2FUSD&quantity=0.010&reduceOnly=false&timeInForce=IOC"


class TestPublicRequests:
    def test_public_get_puts_params_on_url(self, signer):
        request = signer.sign("depth", PUBLIC, "GET", {"symbol": "ETH/USD", "limit": 10})
        parts = urlsplit(request.url)

        assert parts.path == "/api/v1/depth"
        assert dict(parse_qsl(parts.query)) == {"symbol": "ETH/USD", "limit": "10"}
        assert request.body is None
        assert request.headers == {}

    def test_public_without_params_has_no_query(self, signer):
        request = signer.sign("time")
        assert request.url == "https://api-adapter.backend.currency.com/api/v1/time"

    def test_public_does_not_require_credentials(self):
        signer = RequestSigner(ExchangeConfig(), clock=lambda: NOW)
        assert signer.sign("exchangeInfo").method == "GET"


class TestPrivateRequests:
    def test_get_signs_query_on_url(self, signer):
        request = signer.sign("openOrders", PRIVATE, "GET", {"symbol": "ETH/USD"})
        query = urlsplit(request.url).query
        unsigned, signature = query.rsplit("&signature=", 1)

        assert unsigned == "timestamp=1590998061253&recvWindow=5000&symbol=ETH%2FUSD"
        assert signature == hmac_sha256_hex(unsigned, "test-secret")
        assert request.headers == {API_KEY_HEADER: "test-key"}
        assert request.body is None

    def test_delete_signs_query_on_url(self, signer):
        request = signer.sign("order", PRIVATE, "DELETE", {"symbol": "ETH/USD", "orderId": "1"})
        assert "signature=" in request.url
        assert request.body is None
        assert request.method == "DELETE"

    def test_post_signs_form_body(self, signer):
        request = signer.sign("order", PRIVATE, "POST", {"symbol": "ETH/USD", "side": "BUY"})
        unsigned, signature = request.body.rsplit("&signature=", 1)

        assert "?" not in request.url
        assert unsigned.startswith("timestamp=1590998061253&recvWindow=5000&")
        assert signature == hmac_sha256_hex(unsigned, "test-secret")
        assert request.headers["Content-Type"] == FORM_CONTENT_TYPE
        assert request.headers[API_KEY_HEADER] == "test-key"

    def test_recv_window_from_options(self, config):
        config = config.model_copy(update={"options": VenueOptions(recv_window_ms=10000)})
        signer = RequestSigner(config, clock=lambda: NOW)
        request = signer.sign("account", PRIVATE)
        assert "recvWindow=10000" in request.url

    def test_missing_credentials(self):
        signer = RequestSigner(ExchangeConfig(), clock=lambda: NOW)
        with pytest.raises(AuthenticationError):
            signer.sign("account", PRIVATE)


class TestClockSkew:
    def test_nonce_without_skew(self, signer):
        assert signer.nonce() == NOW

    def test_nonce_subtracts_cached_offset(self, signer):
        offset = signer.update_time_difference(server_time=NOW - 1500, local_time=NOW)
        assert offset == 1500
        assert signer.nonce() == NOW - 1500

        request = signer.sign("account", PRIVATE)
        assert f"timestamp={NOW - 1500}" in request.url

    def test_offset_defaults_to_clock(self, signer):
        signer.update_time_difference(server_time=NOW + 200)
        assert signer.time_difference == -200
