"""Admin order management (cross-user listing, status changes, stats)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..common.utils.pagination import parse_int
from .errors import error_response
from .guards import authenticate, authorize_admin, components


admin_bp = Blueprint("crystara_admin", __name__, url_prefix="/admin")


@admin_bp.before_request
def guard_admin_routes():
    if request.method == "OPTIONS":
        return None
    failure = authenticate()
    if failure is not None:
        return failure
    return authorize_admin()


@admin_bp.get("/orders")
def list_orders():
    status = (request.args.get("status") or "").strip()
    if status == "all":
        status = ""
    try:
        result = components()["orders"].list_orders(
            page=parse_int(request.args.get("page"), 1),
            limit=parse_int(request.args.get("limit"), 20),
            status=status or None,
            user_id=(request.args.get("userId") or "").strip() or None,
        )
    except Exception as exc:
        return error_response(exc, "admin.list_orders_failed", "Failed to fetch orders")
    return jsonify(result)


@admin_bp.patch("/orders/<order_id>")
def update_order_status(order_id: str):
    payload = request.get_json(silent=True) or {}
    status = payload.get("status") if isinstance(payload, dict) else None
    if not status:
        return jsonify({"error": "Status is required"}), 400
    try:
        order = components()["orders"].update_status(order_id, status)
    except Exception as exc:
        return error_response(exc, "admin.update_status_failed", "Failed to update order")
    return jsonify({"order": order})


@admin_bp.get("/orders/stats/overview")
def order_stats():
    try:
        stats = components()["orders"].stats()
    except Exception as exc:
        return error_response(exc, "admin.stats_failed", "Failed to fetch statistics")
    return jsonify(stats)
