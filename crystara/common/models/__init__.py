from .base import Base
from .order import Order, OrderStatus
from .user_profile import ADMIN_ROLE, CUSTOMER_ROLE, UserProfile

__all__ = [
    "Base",
    "Order",
    "OrderStatus",
    "UserProfile",
    "ADMIN_ROLE",
    "CUSTOMER_ROLE",
]
