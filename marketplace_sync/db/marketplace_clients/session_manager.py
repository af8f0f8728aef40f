"""
Marketplace API session manager.

Owns a single order client and hands out per-store API handles bound to
the store's marketplace ID.
"""

import logging
from typing import Any, Dict, List, Optional

from marketplace_sync.db.marketplace_clients.order_client import MarketplaceOrderClient
from marketplace_sync.domain.models import ApiOrder, OperationResult, OrderOperation, Store

logger = logging.getLogger(__name__)


class StoreOrderApi:
    """Order API of a single marketplace store."""

    def __init__(self, client: MarketplaceOrderClient, shopping_feed_store_id: int):
        self.client = client
        self.shopping_feed_store_id = shopping_feed_store_id

    async def get_all(self, filters: Dict[str, Any]) -> List[ApiOrder]:
        return await self.client.get_orders(self.shopping_feed_store_id, filters)

    async def execute(self, operation: OrderOperation) -> OperationResult:
        return await self.client.execute_operation(self.shopping_feed_store_id, operation)


class StoreApiResource:
    """API handle of a marketplace store."""

    def __init__(self, client: MarketplaceOrderClient, store: Store):
        self.client = client
        self.store = store

    def get_order_api(self) -> StoreOrderApi:
        return StoreOrderApi(self.client, self.store.shopping_feed_store_id)


class ApiSessionManager:
    """
    Provider of per-store marketplace API handles.

    Usable as an async context manager:

        async with ApiSessionManager() as session_manager:
            order_api = session_manager.get_store_api_resource(store).get_order_api()
    """

    def __init__(self, client: Optional[MarketplaceOrderClient] = None):
        self.client = client or MarketplaceOrderClient()

    async def initialize(self) -> None:
        await self.client.initialize()

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "ApiSessionManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def get_store_api_resource(self, store: Store) -> StoreApiResource:
        """Get the API handle of a store."""
        return StoreApiResource(self.client, store)
