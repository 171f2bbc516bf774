"""Razorpay integration: order creation over the REST API and payment signature checks.

Order creation uses HTTP basic auth (key id / key secret) against
``POST {api_url}/orders``. Amounts sent to the gateway are in the smallest
currency unit (paise for INR).
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Any, Dict, Optional

import requests

from ..common.services.errors import GatewayError
from ..common.services.logging import log_event


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id`` keyed with the gateway secret."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new((secret or "").encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    if not order_id or not payment_id or not signature:
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("ascii"), str(signature).encode("utf-8"))


class RazorpayGateway:
    """Thin client for the parts of the Razorpay API the storefront uses."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        *,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self.logger = logging.getLogger(__name__)

        if not key_id or not key_secret:
            log_event(
                "warning",
                "gateway.credentials_missing",
                message="RAZORPAY_KEY_ID or RAZORPAY_KEY_SECRET not set; order creation will fail",
            )

    def _client(self) -> requests.Session:
        # created lazily so the app starts without network access
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create a gateway order and return the gateway's order object verbatim."""
        if not self.key_id or not self.key_secret:
            raise GatewayError("Razorpay credentials are not configured")

        body = {
            "amount": int(amount_minor),
            "currency": currency,
            "receipt": receipt or f"receipt_{int(time.time() * 1000)}",
            "notes": notes or {},
        }
        try:
            response = self._client().post(
                f"{self.api_url}/orders",
                json=body,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise GatewayError("Razorpay request timed out") from exc
        except requests.exceptions.RequestException as exc:
            raise GatewayError(f"Razorpay request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            description = (payload.get("error") or {}).get("description") if isinstance(payload, dict) else None
            raise GatewayError(
                description or f"Razorpay returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        if not isinstance(payload, dict) or not payload.get("id"):
            raise GatewayError("Razorpay returned an order without id", status_code=response.status_code)

        self.logger.debug("Razorpay order %s created (amount=%s)", payload.get("id"), body["amount"])
        return payload

    def verify_payment(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_signature(order_id, payment_id, signature, self.key_secret)
