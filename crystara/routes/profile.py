"""Onboarding and profile endpoints."""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from ..common.utils.dto import address_book, default_address
from .errors import error_response
from .guards import components, require_user


profile_bp = Blueprint("crystara_profile", __name__)


@profile_bp.post("/onboarding/profile")
@require_user
def save_profile():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        profile = components()["profiles"].save_profile(
            user_id=g.identity.user_id,
            email=g.identity.email,
            payload=payload,
        )
    except Exception as exc:
        return error_response(exc, "profile.save_failed", "Failed to save profile")
    return jsonify({"profile": profile})


@profile_bp.get("/onboarding/status")
@require_user
def onboarding_status():
    return jsonify({"isOnboarded": components()["profiles"].is_onboarded(g.identity.user_id)})


@profile_bp.get("/profile")
@require_user
def get_profile():
    try:
        profile = components()["profiles"].get_profile(g.identity.user_id)
    except Exception as exc:
        return error_response(exc, "profile.fetch_failed", "Failed to fetch profile")
    return jsonify(
        {"profile": profile, "addresses": address_book(profile), "defaultAddress": default_address(profile)}
    )


@profile_bp.patch("/profile")
@require_user
def update_profile():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        profile = components()["profiles"].update_profile(g.identity.user_id, payload)
    except Exception as exc:
        return error_response(exc, "profile.update_failed", "Failed to update profile")
    return jsonify({"profile": profile})
