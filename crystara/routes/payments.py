"""Gateway order creation and payment signature verification."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..common.services.errors import GatewayError
from ..common.services.logging import log_event
from ..common.utils.validators import parse_amount, to_minor_units
from ..config import validate_currency
from .guards import components


payments_bp = Blueprint("crystara_payments", __name__)


@payments_bp.post("/create-order")
def create_order():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid amount"}), 400
    try:
        amount = parse_amount(payload.get("amount"))
        currency = validate_currency(payload.get("currency") or current_app.config["CRYSTARA_CONFIG"].default_currency)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    notes = payload.get("notes")
    if notes is not None and not isinstance(notes, dict):
        return jsonify({"error": "notes must be an object"}), 400

    try:
        order = components()["gateway"].create_order(
            to_minor_units(amount),
            currency,
            receipt=payload.get("receipt") or None,
            notes=notes,
        )
    except GatewayError as exc:
        log_event("error", "gateway.create_order_failed", error=str(exc), status_code=exc.status_code)
        return jsonify({"error": "Failed to create order"}), 500
    except Exception as exc:
        log_event("error", "gateway.create_order_failed", error=repr(exc))
        return jsonify({"error": "Failed to create order"}), 500

    log_event("info", "gateway.order_created", gateway_order_id=order.get("id"), amount=order.get("amount"))
    return jsonify(order)


@payments_bp.post("/verify-payment")
def verify_payment():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"valid": False, "error": "Missing payment fields"}), 400
    order_id = payload.get("razorpay_order_id")
    payment_id = payload.get("razorpay_payment_id")
    signature = payload.get("razorpay_signature")

    if not order_id or not payment_id or not signature:
        return jsonify({"valid": False, "error": "Missing payment fields"}), 400

    try:
        valid = components()["gateway"].verify_payment(str(order_id), str(payment_id), str(signature))
    except Exception as exc:
        log_event("error", "payment.verify_failed", error=repr(exc))
        return jsonify({"valid": False, "error": "Verification failed"}), 500

    if valid:
        log_event("info", "payment.verified", gateway_order_id=order_id, payment_id=payment_id)
        return jsonify({"valid": True})

    log_event("warning", "payment.signature_mismatch", gateway_order_id=order_id, payment_id=payment_id)
    return jsonify({"valid": False, "error": "Invalid signature"}), 400
