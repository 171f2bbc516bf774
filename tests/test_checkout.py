"""Tests for checkout totals and the checkout orchestration."""

from decimal import Decimal

import pytest
import requests

from crystara.common.services.errors import GatewayError
from crystara.services import compute_signature
from crystara.storefront import (
    CartItem,
    CartState,
    CheckoutClient,
    CheckoutError,
    MemoryStorage,
    Shopper,
    compute_totals,
)

from .conftest import GATEWAY_SECRET


class FlaskBackedSession:
    """Routes CheckoutClient requests into the Flask test client."""

    def __init__(self, client):
        self.client = client
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        path = url.split("http://api.test", 1)[1]
        self.calls.append(path)
        return _Response(self.client.post(path, json=json, headers=headers))


class _Response:
    def __init__(self, flask_response):
        self._resp = flask_response
        self.status_code = flask_response.status_code
        self.ok = self.status_code < 400

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("no json")
        return data


class BrokenSession:
    def post(self, *args, **kwargs):
        raise requests.exceptions.ConnectionError("backend down")


def _cart(*prices):
    cart = CartState(storage=MemoryStorage())
    for index, price in enumerate(prices):
        cart.add(CartItem(id=f"p{index}", name=f"Crystal {index}", price=price))
    return cart


def _callback(order_id, payment_id="pay_E2E1", secret=GATEWAY_SECRET):
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": compute_signature(order_id, payment_id, secret),
    }


@pytest.fixture
def shopper(make_token):
    return Shopper(email="buyer@example.com", access_token=make_token("user-1"))


@pytest.fixture
def checkout(client):
    return CheckoutClient("http://api.test", "rzp_test_key", session=FlaskBackedSession(client))


class TestTotals:
    def test_shipping_fee_below_threshold(self):
        totals = compute_totals(Decimal("998"))

        assert totals.shipping == Decimal("99")
        assert totals.grand_total == Decimal("1097")

    def test_free_shipping_at_threshold(self):
        totals = compute_totals(999)

        assert totals.shipping == Decimal("0")
        assert totals.grand_total == Decimal("999")

    def test_minor_units(self):
        assert compute_totals(Decimal("400.5")).amount_minor == 49950


class TestCheckoutFlow:
    def test_full_checkout(self, checkout, shopper, gateway, client, auth_header):
        cart = _cart(499, 300)

        intent = checkout.start(cart, shopper)
        result = checkout.complete(
            cart, shopper, intent, _callback(intent.order_id), {"street": "1 Main", "city": "Goa"}
        )

        assert gateway.calls[0]["amount"] == 89800
        assert gateway.calls[0]["notes"] == {"user_email": "buyer@example.com"}
        assert result.success is True
        assert result.order["amount"] == 89800
        assert result.order["payment_id"] == "pay_E2E1"
        assert cart.items == []
        history = client.get("/orders/user/history", headers=auth_header("user-1")).get_json()["orders"]
        assert len(history) == 1

    def test_forged_callback_keeps_cart(self, checkout, shopper):
        cart = _cart(1200)
        intent = checkout.start(cart, shopper)

        result = checkout.complete(cart, shopper, intent, _callback(intent.order_id, secret="forged"))

        assert result.success is False
        assert "verification failed" in result.error
        assert len(cart.items) == 1
        assert checkout._session.calls == ["/create-order", "/verify-payment"]

    def test_empty_cart(self, checkout, shopper):
        with pytest.raises(CheckoutError, match="empty"):
            checkout.start(_cart(), shopper)

    def test_requires_sign_in(self, checkout):
        with pytest.raises(CheckoutError, match="sign in"):
            checkout.start(_cart(100), None)

    def test_backend_error_message_surfaces(self, checkout, shopper, gateway):
        gateway.fail_with = GatewayError("boom")

        with pytest.raises(CheckoutError, match="Failed to create order"):
            checkout.start(_cart(100), shopper)

    def test_unreachable_backend(self, shopper):
        client = CheckoutClient("http://api.test", session=BrokenSession())

        with pytest.raises(CheckoutError):
            client.start(_cart(100), shopper)

    def test_save_failure_reports_backend_error(self, checkout, shopper):
        cart = _cart(100)
        intent = checkout.start(cart, shopper)
        expired = Shopper(email=shopper.email, access_token="not-a-token")

        result = checkout.complete(cart, expired, intent, _callback(intent.order_id))

        assert result.success is False
        assert result.error == "Invalid token"
        assert len(cart.items) == 1
