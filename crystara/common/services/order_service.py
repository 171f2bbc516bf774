from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from ...config import validate_currency
from ..db.session import get_session
from ..models.base import utcnow
from ..models.order import Order, OrderStatus
from ..utils.dto import to_order_dto
from ..utils.pagination import normalize_paging, page_count
from ..utils.validators import ensure_non_negative_int
from .errors import NotFoundError
from .logging import log_event


ADDRESS_FIELDS = ("street", "city", "state", "zip")


def _normalize_items(items) -> List[Dict]:
    if not isinstance(items, list) or not items:
        raise ValueError("Order must contain at least one item")
    snapshot = []
    for it in items:
        if not isinstance(it, dict):
            raise ValueError("Invalid order item")
        quantity = it.get("quantity")
        quantity = 1 if quantity is None else ensure_non_negative_int(quantity, "quantity")
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        snapshot.append(
            {
                "id": str(it.get("id") or ""),
                "name": it.get("name") or "",
                "price": it.get("price") or 0,
                "quantity": quantity,
            }
        )
    return snapshot


def _normalize_address(address) -> Optional[Dict]:
    if not address:
        return None
    if not isinstance(address, dict):
        raise ValueError("Invalid shipping address")
    cleaned = {k: address.get(k) for k in ADDRESS_FIELDS if address.get(k)}
    return cleaned or None


class OrderService:
    """Order persistence, customer history and admin reporting."""

    def __init__(self, session_factory=get_session):
        self._session_factory = session_factory

    def create_order(
        self,
        *,
        user_id: str,
        order_id: Optional[str],
        payment_id: Optional[str],
        amount,
        items,
        shipping_address: Optional[Dict] = None,
        currency: str = "INR",
        status: Optional[str] = None,
    ) -> Dict:
        """Persist a paid order; returns {"order": dto, "created": bool}.

        A second call with the same payment id returns the stored row unchanged.
        """
        if not order_id or not payment_id or amount in (None, "") or not items:
            raise ValueError("Missing required fields: orderId, paymentId, amount, items")
        amount_minor = ensure_non_negative_int(amount, "amount")
        snapshot = _normalize_items(items)
        address = _normalize_address(shipping_address)
        state = OrderStatus.parse(status) if status else OrderStatus.COMPLETED
        currency = validate_currency(currency)

        with self._session_factory() as session:
            existing = self._find_by_payment(session, payment_id)
            if existing:
                return self._replay(existing, user_id)

            row = Order(
                id=str(uuid4()),
                user_id=user_id,
                order_id=order_id,
                payment_id=payment_id,
                amount=amount_minor,
                currency=currency,
                items=snapshot,
                shipping_address=address,
                status=state.value,
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError:
                # a concurrent request stored this payment id first
                session.rollback()
                existing = self._find_by_payment(session, payment_id)
                if existing is None:
                    raise
                return self._replay(existing, user_id)
            log_event("info", "order.created", order_row=row.id, user_id=user_id, amount=amount_minor, items=len(snapshot))
            return {"order": to_order_dto(row), "created": True}

    def _find_by_payment(self, session, payment_id: str) -> Optional[Order]:
        return session.query(Order).filter(Order.payment_id == payment_id).first()

    def _replay(self, existing: Order, user_id: str) -> Dict:
        if existing.user_id != user_id:
            raise ValueError("Payment already recorded for another account")
        log_event("info", "order.replayed", order_row=existing.id, payment_id=existing.payment_id)
        return {"order": to_order_dto(existing), "created": False}

    def list_user_orders(self, user_id: str) -> List[Dict]:
        with self._session_factory() as session:
            rows = (
                session.query(Order)
                .filter(Order.user_id == user_id)
                .order_by(Order.created_at.desc())
                .all()
            )
            return [to_order_dto(r) for r in rows]

    def get_user_order(self, user_id: str, row_id: str) -> Dict:
        with self._session_factory() as session:
            row = (
                session.query(Order)
                .filter(Order.id == row_id, Order.user_id == user_id)
                .first()
            )
            if not row:
                raise NotFoundError("Order not found")
            return to_order_dto(row)

    def list_orders(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict:
        """Admin listing across all users, newest first, with owner name/email."""
        p, ps = normalize_paging(page, limit)
        with self._session_factory() as session:
            q = session.query(Order)
            if status:
                q = q.filter(Order.status == OrderStatus.parse(status).value)
            if user_id:
                q = q.filter(Order.user_id == user_id)
            # count and page share the same filtered query
            total = q.count()
            rows = (
                q.order_by(Order.created_at.desc(), Order.id.desc())
                .offset((p - 1) * ps)
                .limit(ps)
                .all()
            )
            return {
                "orders": [to_order_dto(r, with_profile=True) for r in rows],
                "pagination": {
                    "page": p,
                    "limit": ps,
                    "total": total,
                    "totalPages": page_count(total, ps),
                },
            }

    def update_status(self, row_id: str, status) -> Dict:
        state = OrderStatus.parse(status)
        with self._session_factory() as session:
            row = session.query(Order).filter(Order.id == row_id).first()
            if not row:
                raise NotFoundError("Order not found")
            previous = row.status
            row.status = state.value
            row.updated_at = utcnow()
            session.flush()
            log_event("info", "order.status_changed", order_row=row_id, previous=previous, status=state.value)
            return to_order_dto(row, with_profile=True)

    def stats(self) -> Dict:
        with self._session_factory() as session:
            rows = session.query(Order.status, Order.amount).all()
        counts = {s.value: 0 for s in OrderStatus}
        revenue = 0
        for status, amount in rows:
            revenue += int(amount or 0)
            if status in counts:
                counts[status] += 1
        return {
            "totalOrders": len(rows),
            "totalRevenue": revenue,
            "completedOrders": counts[OrderStatus.COMPLETED.value],
            "pendingOrders": counts[OrderStatus.PENDING.value],
            "failedOrders": counts[OrderStatus.FAILED.value],
        }
