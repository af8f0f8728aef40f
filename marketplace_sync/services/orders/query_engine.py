"""
OrderQueryEngine - Candidate sets for order synchronization.

Produces, for a store, the orders to pull from the marketplace (importable,
syncable) and the local orders that still need a notification pushed to it
(import, cancellation, shipment). All operations are read-only.
"""

import logging

from marketplace_sync.domain.models import ApiOrder, MarketplaceOrder, Store
from marketplace_sync.services.orders.interfaces import IApiSessionManager, IOrderConfig, IOrderRepository
from marketplace_sync.services.orders.query_spec import OrderQuerySpec
from marketplace_sync.services.orders.sync_policy import resolve_syncable_statuses

logger = logging.getLogger(__name__)

API_FILTER_ACKNOWLEDGEMENT = "acknowledgment"
API_FILTER_CHANNEL_ID = "channelId"
API_FILTER_REFERENCE = "reference"
API_FILTER_SINCE = "since"
API_FILTER_STATUS = "status"

API_ACKNOWLEDGED = "acknowledged"
API_UNACKNOWLEDGED = "unacknowledged"


class OrderQueryEngine:
    """Read-only queries against the marketplace API and the local order store."""

    def __init__(
        self,
        api_session_manager: IApiSessionManager,
        order_config: IOrderConfig,
        order_repository: IOrderRepository,
    ):
        """
        Initialize the query engine.

        Args:
            api_session_manager: Provider of per-store marketplace API handles
            order_config: Per-store order settings
            order_repository: Local marketplace order queries
        """
        self.api_session_manager = api_session_manager
        self.order_config = order_config
        self.order_repository = order_repository

    def get_syncable_statuses(self, store: Store) -> list[str]:
        return resolve_syncable_statuses(self.order_config, store)

    # ------------------------- Remote orders -------------------------
    async def find_remote_importable(self, store: Store) -> list[ApiOrder]:
        """Get the unacknowledged marketplace orders created since the import-from date."""
        order_api = self.api_session_manager.get_store_api_resource(store).get_order_api()

        return await order_api.get_all(
            {
                API_FILTER_ACKNOWLEDGEMENT: API_UNACKNOWLEDGED,
                API_FILTER_SINCE: self.order_config.get_import_from_date(store),
            }
        )

    async def find_remote_importable_by_reference(
        self, store: Store, channel_id: int | None, reference: str | None
    ) -> ApiOrder | None:
        """
        Get the single unacknowledged marketplace order with the given channel and reference.

        Args:
            store: Store to query
            channel_id: Marketplace channel ID
            reference: Marketplace order reference

        Returns:
            ApiOrder | None: The matching order, or None if there is no match
                or more than one (ambiguous) match
        """
        if not channel_id or not reference:
            return None

        order_api = self.api_session_manager.get_store_api_resource(store).get_order_api()

        orders = await order_api.get_all(
            {
                API_FILTER_ACKNOWLEDGEMENT: API_UNACKNOWLEDGED,
                API_FILTER_CHANNEL_ID: int(channel_id),
                API_FILTER_REFERENCE: reference.strip(),
            }
        )

        single_order = None

        for order in orders:
            if order.reference == reference:
                if single_order is None:
                    single_order = order
                else:
                    logger.debug(
                        f"Ambiguous reference {reference} on channel {channel_id} for store {store.id}, ignoring"
                    )
                    return None

        return single_order

    async def find_remote_syncable(self, store: Store) -> list[ApiOrder]:
        """Get the acknowledged marketplace orders whose status is configured for syncing."""
        statuses = self.get_syncable_statuses(store)

        if not statuses:
            return []

        order_api = self.api_session_manager.get_store_api_resource(store).get_order_api()

        return await order_api.get_all(
            {
                API_FILTER_STATUS: statuses,
                API_FILTER_ACKNOWLEDGEMENT: API_ACKNOWLEDGED,
                API_FILTER_SINCE: self.order_config.get_syncing_from_date(store),
            }
        )

    # ------------------------- Local orders -------------------------
    async def find_local_importable(self, store: Store, limit: int | None = None) -> list[MarketplaceOrder]:
        """Get the local orders that still have to be imported, optionally limited to `limit`."""
        spec = OrderQuerySpec(
            store_id=store.id,
            is_imported=False,
            is_importable=True,
            created_from=self.order_config.get_import_from_date(store),
        )

        return await self.order_repository.query(spec.paginated(limit))

    async def find_local_syncable(self, store: Store, limit: int | None = None) -> list[MarketplaceOrder]:
        """Get the imported local orders whose marketplace status is configured for syncing."""
        statuses = self.get_syncable_statuses(store)

        if not statuses:
            return []

        spec = OrderQuerySpec(
            store_id=store.id,
            is_imported=True,
            shopping_feed_statuses=tuple(statuses),
            created_from=self.order_config.get_syncing_from_date(store),
        )

        return await self.order_repository.query(spec.paginated(limit))

    async def find_notifiable_imports(self, store: Store) -> list[MarketplaceOrder]:
        return await self.order_repository.query(OrderQuerySpec(store_id=store.id, notifiable_import=True))

    async def find_notifiable_cancellations(self, store: Store) -> list[MarketplaceOrder]:
        return await self.order_repository.query(OrderQuerySpec(store_id=store.id, notifiable_cancellation=True))

    async def find_notifiable_shipments(self, store: Store) -> list[MarketplaceOrder]:
        """Get the shipped orders not yet notified, excluding those fulfilled by the marketplace."""
        return await self.order_repository.query(
            OrderQuerySpec(store_id=store.id, is_fulfilled=False, notifiable_shipment=True)
        )
