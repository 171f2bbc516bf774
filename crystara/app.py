"""Crystara storefront API Flask application."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import click
from flask import Flask, current_app, jsonify
from sqlalchemy import text

from .common.db import session as db
from .common.services.logging import log_event
from .common.services.order_service import OrderService
from .common.services.profile_service import ProfileService
from .config import CrystaraConfig
from .routes import admin, orders, payments, profile
from .services import RazorpayGateway, SupabaseIdentityProvider


def build_components(config: CrystaraConfig) -> Dict[str, Any]:
    engine = db.configure(config.database_url)
    db.init_db(engine)
    return {
        "engine": engine,
        "gateway": RazorpayGateway(config.razorpay_key_id, config.razorpay_key_secret, config.razorpay_api_url),
        "identity": SupabaseIdentityProvider(config.jwt_secret, config.jwt_audience or None),
        "orders": OrderService(db.get_session),
        "profiles": ProfileService(db.get_session),
    }


def _register_cors(app: Flask, origin: str) -> None:
    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PATCH,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response


def _register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Create the order and profile tables."""
        db.init_db(current_app.extensions["crystara_components"]["engine"])
        click.echo("Database tables created.")

    @app.cli.command("set-role")
    @click.argument("user_id")
    @click.argument("role", type=click.Choice(["admin", "customer"]))
    def set_role_command(user_id: str, role: str):
        """Grant or revoke the admin role for USER_ID."""
        profiles = current_app.extensions["crystara_components"]["profiles"]
        profiles.set_role(user_id, role)
        click.echo(f"{user_id} is now {role}.")


def create_app(config: Optional[CrystaraConfig] = None, components: Optional[Dict[str, Any]] = None) -> Flask:
    config = config or CrystaraConfig.load()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))

    app = Flask(__name__)
    app.config["CRYSTARA_CONFIG"] = config
    app.extensions["crystara_components"] = components if components is not None else build_components(config)

    _register_cors(app, config.cors_origin)
    _register_cli(app)

    app.register_blueprint(payments.payments_bp)
    app.register_blueprint(orders.orders_bp)
    app.register_blueprint(admin.admin_bp)
    app.register_blueprint(profile.profile_bp)

    @app.get("/")
    def health():
        status = {"backend": "running", "database": "not configured"}
        engine = app.extensions["crystara_components"].get("engine")
        if engine is not None:
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                status["database"] = "connected"
            except Exception as exc:
                log_event("error", "health.database_unreachable", error=str(exc))
                status["database"] = "error"
        return jsonify(status)

    return app


def main() -> None:
    app = create_app()
    config = app.config["CRYSTARA_CONFIG"]
    log_event("info", "server.start", port=config.port, cors_origin=config.cors_origin)
    app.run(host="0.0.0.0", port=config.port, debug=False)


if __name__ == "__main__":
    main()
