import enum

from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid status. Allowed values: {allowed}") from None


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    # owner is the identity-provider subject; a profile row may not exist yet
    user_id = Column(String(64), nullable=False, index=True)
    order_id = Column(String(64), nullable=False, index=True)
    payment_id = Column(String(64), nullable=False, unique=True)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    items = Column(JSON, nullable=False)
    shipping_address = Column(JSON, nullable=True)
    status = Column(String(16), nullable=False, default=OrderStatus.COMPLETED.value, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    profile = relationship(
        "UserProfile",
        primaryjoin="foreign(Order.user_id) == UserProfile.id",
        viewonly=True,
        lazy="joined",
    )
