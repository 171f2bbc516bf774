from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from ..common.services.errors import NotFoundError
from ..common.services.logging import log_event


def error_response(exc: Exception, event: str, fallback: str):
    """Map a service exception onto the API error taxonomy."""
    if isinstance(exc, NotFoundError):
        return jsonify({"error": str(exc)}), 404
    if isinstance(exc, ValueError):
        return jsonify({"error": str(exc)}), 400
    if isinstance(exc, SQLAlchemyError):
        log_event("error", event, error=str(exc))
        return jsonify({"error": str(getattr(exc, "orig", None) or exc)}), 400
    log_event("error", event, error=repr(exc))
    return jsonify({"error": fallback}), 500
