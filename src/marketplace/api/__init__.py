"""Marketplace API package."""

from marketplace.api.errors import register_marketplace_errors
from marketplace.api.routes import cart_router, order_router, pricing_router

__all__ = ["order_router", "cart_router", "pricing_router", "register_marketplace_errors"]
