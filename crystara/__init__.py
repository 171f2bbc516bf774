"""Crystara crystal storefront: payment, order and profile backend."""

__version__ = "0.1.0"
