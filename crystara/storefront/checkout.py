"""Checkout orchestration against the Crystara API.

Flow: `start()` computes the grand total and asks the backend for a gateway
order; the caller opens the gateway's hosted payment UI with the returned
`PaymentIntent`; `complete()` receives the gateway callback, verifies the
signature with the backend, then persists the order and clears the cart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import requests

from ..common.services.logging import log_event
from .cart import CartState


FREE_SHIPPING_THRESHOLD = Decimal("999")
SHIPPING_FEE = Decimal("99")


class CheckoutError(Exception):
    pass


@dataclass
class Shopper:
    email: str
    access_token: str


@dataclass
class Totals:
    subtotal: Decimal
    shipping: Decimal
    grand_total: Decimal

    @property
    def amount_minor(self) -> int:
        return int((self.grand_total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class PaymentIntent:
    gateway_order: Dict[str, Any]
    key_id: str
    totals: Totals
    prefill_email: str = ""

    @property
    def order_id(self) -> str:
        return self.gateway_order["id"]


@dataclass
class CheckoutResult:
    success: bool
    order: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


def compute_totals(subtotal) -> Totals:
    sub = Decimal(str(subtotal))
    shipping = Decimal("0") if sub >= FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    return Totals(subtotal=sub, shipping=shipping, grand_total=sub + shipping)


class CheckoutClient:
    def __init__(
        self,
        base_url: str,
        key_id: str = "",
        *,
        currency: str = "INR",
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.key_id = key_id
        self.currency = currency
        self.timeout = timeout
        self._session = session or requests.Session()

    def _post(self, path: str, body: Dict[str, Any], token: Optional[str] = None):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = self._session.post(f"{self.base_url}{path}", json=body, headers=headers, timeout=self.timeout)
        try:
            data = response.json()
        except ValueError:
            data = {}
        return response, data if isinstance(data, dict) else {}

    def start(self, cart: CartState, shopper: Optional[Shopper]) -> PaymentIntent:
        if not cart.items:
            raise CheckoutError("Your cart is empty")
        if shopper is None or not shopper.access_token:
            raise CheckoutError("Please sign in to complete your purchase")

        totals = compute_totals(cart.total_price)
        try:
            response, order = self._post(
                "/create-order",
                {
                    "amount": float(totals.grand_total),
                    "currency": self.currency,
                    "notes": {"user_email": shopper.email},
                },
            )
        except requests.exceptions.RequestException as exc:
            log_event("error", "checkout.create_order_unreachable", error=str(exc))
            raise CheckoutError("Something went wrong while initiating payment.") from exc

        if not response.ok or not order.get("id"):
            raise CheckoutError(order.get("error") or "Failed to start payment. Please try again.")

        return PaymentIntent(gateway_order=order, key_id=self.key_id, totals=totals, prefill_email=shopper.email)

    def complete(
        self,
        cart: CartState,
        shopper: Shopper,
        intent: PaymentIntent,
        callback: Dict[str, str],
        shipping_address: Optional[Dict[str, str]] = None,
    ) -> CheckoutResult:
        """Verify the gateway callback, then save the order; the cart is cleared only on success."""
        order_id = callback.get("razorpay_order_id")
        payment_id = callback.get("razorpay_payment_id")
        try:
            response, verdict = self._post(
                "/verify-payment",
                {
                    "razorpay_order_id": order_id,
                    "razorpay_payment_id": payment_id,
                    "razorpay_signature": callback.get("razorpay_signature"),
                },
            )
            if not response.ok or not verdict.get("valid"):
                return CheckoutResult(
                    success=False,
                    error="Payment verification failed. If amount was deducted, please contact support.",
                    details=verdict,
                )

            response, saved = self._post(
                "/orders",
                {
                    "orderId": order_id,
                    "paymentId": payment_id,
                    "amount": intent.totals.amount_minor,
                    "currency": self.currency,
                    "items": [
                        {"id": it.id, "name": it.name, "price": it.price, "quantity": it.quantity}
                        for it in cart.items
                    ],
                    "shippingAddress": shipping_address or None,
                },
                token=shopper.access_token,
            )
        except requests.exceptions.RequestException as exc:
            # the charge may have gone through; payment id is the replay key for a retry
            log_event("error", "checkout.complete_unreachable", payment_id=payment_id, error=str(exc))
            return CheckoutResult(success=False, error="Something went wrong while verifying your payment.")

        if not response.ok:
            return CheckoutResult(success=False, error=saved.get("error") or "Failed to save order", details=saved)

        cart.clear()
        log_event("info", "checkout.completed", payment_id=payment_id, amount=intent.totals.amount_minor)
        return CheckoutResult(success=True, order=saved.get("order"))
