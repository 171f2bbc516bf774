from .cart import CartItem, CartState, JsonFileStorage, MemoryStorage, WishlistState
from .checkout import CheckoutClient, CheckoutError, CheckoutResult, PaymentIntent, Shopper, compute_totals

__all__ = [
    "CartItem",
    "CartState",
    "JsonFileStorage",
    "MemoryStorage",
    "WishlistState",
    "CheckoutClient",
    "CheckoutError",
    "CheckoutResult",
    "PaymentIntent",
    "Shopper",
    "compute_totals",
]
