"""External collaborators wired into the Flask app."""

from .identity_provider import Identity, SupabaseIdentityProvider, TokenError
from .payment_gateway import RazorpayGateway, compute_signature, verify_signature

__all__ = [
    "Identity",
    "SupabaseIdentityProvider",
    "TokenError",
    "RazorpayGateway",
    "compute_signature",
    "verify_signature",
]
