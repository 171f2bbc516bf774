"""Bearer authentication and admin authorization for API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict

from flask import current_app, g, jsonify, request

from ..common.models.user_profile import ADMIN_ROLE
from ..common.services.logging import log_event
from ..services.identity_provider import TokenError


def components() -> Dict[str, Any]:
    return current_app.extensions["crystara_components"]


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return ""
    return header[len("Bearer "):].strip()


def authenticate():
    """Resolve the caller into `g.identity`; returns an error response or None."""
    token = _bearer_token()
    if not token:
        return jsonify({"error": "No token provided"}), 401
    try:
        g.identity = components()["identity"].resolve(token)
    except TokenError as exc:
        return jsonify({"error": str(exc)}), 401
    return None


def authorize_admin():
    identity = g.identity
    if identity.role_claim == ADMIN_ROLE:
        return None
    try:
        role = components()["profiles"].get_role(identity.user_id)
    except Exception as exc:
        log_event("error", "auth.role_lookup_failed", user_id=identity.user_id, error=str(exc))
        return jsonify({"error": "Failed to verify admin access"}), 500
    if role != ADMIN_ROLE:
        return jsonify({"error": "Admin access required"}), 403
    return None


def require_user(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        failure = authenticate()
        if failure is not None:
            return failure
        return view(*args, **kwargs)

    return wrapper
