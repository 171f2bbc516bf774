"""Pytest fixtures for the Crystara API tests."""

import time
from datetime import datetime, timedelta

import jwt
import pytest
from sqlalchemy.orm import sessionmaker

from crystara.app import create_app
from crystara.common.db.session import build_engine, init_db, make_session_scope
from crystara.common.models import Order, UserProfile
from crystara.common.services.order_service import OrderService
from crystara.common.services.profile_service import ProfileService
from crystara.config import CrystaraConfig
from crystara.services import SupabaseIdentityProvider, verify_signature


JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
GATEWAY_SECRET = "test_gateway_secret"


class FakeGateway:
    """Records create_order calls instead of talking to Razorpay."""

    def __init__(self, secret=GATEWAY_SECRET):
        self.secret = secret
        self.calls = []
        self.fail_with = None

    def create_order(self, amount_minor, currency, receipt=None, notes=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append({"amount": amount_minor, "currency": currency, "receipt": receipt, "notes": notes})
        return {
            "id": f"order_test{len(self.calls)}",
            "entity": "order",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt or "receipt_auto",
            "status": "created",
        }

    def verify_payment(self, order_id, payment_id, signature):
        return verify_signature(order_id, payment_id, signature, self.secret)


@pytest.fixture
def config():
    return CrystaraConfig(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=GATEWAY_SECRET,
        razorpay_api_url="https://api.razorpay.test/v1",
        database_url="sqlite://",
        jwt_secret=JWT_SECRET,
        jwt_audience="authenticated",
        cors_origin="http://localhost:5173",
        port=5001,
        log_level="INFO",
        default_currency="INR",
    )


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_scope(engine):
    return make_session_scope(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True))


@pytest.fixture
def order_service(session_scope):
    return OrderService(session_scope)


@pytest.fixture
def profile_service(session_scope):
    return ProfileService(session_scope)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(config, engine, gateway, order_service, profile_service):
    components = {
        "engine": engine,
        "gateway": gateway,
        "identity": SupabaseIdentityProvider(JWT_SECRET, "authenticated"),
        "orders": order_service,
        "profiles": profile_service,
    }
    flask_app = create_app(config, components)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_token():
    def _make(user_id="user-1", email="buyer@example.com", **extra):
        claims = {
            "sub": user_id,
            "email": email,
            "aud": "authenticated",
            "exp": int(time.time()) + 3600,
        }
        claims.update(extra)
        return jwt.encode(claims, JWT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def auth_header(make_token):
    def _header(user_id="user-1", email="buyer@example.com", **extra):
        return {"Authorization": f"Bearer {make_token(user_id, email, **extra)}"}

    return _header


@pytest.fixture
def add_profile(session_scope):
    def _add(user_id, name="Asha", email=None, role="customer", **fields):
        with session_scope() as session:
            session.add(UserProfile(id=user_id, name=name, email=email or f"{user_id}@example.com", role=role, **fields))

    return _add


@pytest.fixture
def add_order(session_scope):
    """Insert an order row directly with an explicit creation time offset (minutes ago)."""
    counter = {"n": 0}

    def _add(user_id="user-1", status="completed", amount=1000, minutes_ago=0):
        counter["n"] += 1
        n = counter["n"]
        row_id = f"row-{n:04d}"
        with session_scope() as session:
            session.add(
                Order(
                    id=row_id,
                    user_id=user_id,
                    order_id=f"order_{n}",
                    payment_id=f"pay_{n}",
                    amount=amount,
                    currency="INR",
                    items=[{"id": "p1", "name": "Amethyst Bracelet", "price": amount / 100, "quantity": 1}],
                    status=status,
                    created_at=datetime(2026, 1, 1) + timedelta(minutes=10_000 - minutes_ago),
                )
            )
        return row_id

    return _add
