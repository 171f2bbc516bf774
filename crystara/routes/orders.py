"""Customer order endpoints."""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from .errors import error_response
from .guards import components, require_user


orders_bp = Blueprint("crystara_orders", __name__, url_prefix="/orders")


@orders_bp.post("")
@require_user
def create_order():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        result = components()["orders"].create_order(
            user_id=g.identity.user_id,
            order_id=payload.get("orderId"),
            payment_id=payload.get("paymentId"),
            amount=payload.get("amount"),
            items=payload.get("items"),
            shipping_address=payload.get("shippingAddress"),
            currency=payload.get("currency") or "INR",
            status=payload.get("status"),
        )
    except Exception as exc:
        return error_response(exc, "order.create_failed", "Failed to create order")
    return jsonify({"order": result["order"]}), 201 if result["created"] else 200


@orders_bp.get("/user/history")
@require_user
def order_history():
    try:
        orders = components()["orders"].list_user_orders(g.identity.user_id)
    except Exception as exc:
        return error_response(exc, "order.history_failed", "Failed to fetch orders")
    return jsonify({"orders": orders})


@orders_bp.get("/<order_id>")
@require_user
def get_order(order_id: str):
    try:
        order = components()["orders"].get_user_order(g.identity.user_id, order_id)
    except Exception as exc:
        return error_response(exc, "order.fetch_failed", "Failed to fetch order")
    return jsonify({"order": order})
