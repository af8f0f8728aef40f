"""
Marketplace API clients.

- BaseMarketplaceClient: Session, authentication, rate limit handling
- MarketplaceOrderClient: Order listing and order operations
- ApiSessionManager: Per-store API handles
"""

from .base_client import BaseMarketplaceClient
from .order_client import MarketplaceOrderClient, serialize_filters
from .session_manager import ApiSessionManager, StoreApiResource, StoreOrderApi

__all__ = [
    "BaseMarketplaceClient",
    "MarketplaceOrderClient",
    "serialize_filters",
    "ApiSessionManager",
    "StoreApiResource",
    "StoreOrderApi",
]
