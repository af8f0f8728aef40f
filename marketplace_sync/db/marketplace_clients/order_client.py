"""
Marketplace order client.

Lists store orders and executes order operations (acknowledge,
unacknowledge, cancel, ship) on the marketplace API.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from marketplace_sync.db.marketplace_clients.base_client import BaseMarketplaceClient
from marketplace_sync.domain.models import ApiOrder, ApiTicket, OperationResult, OrderOperation

logger = logging.getLogger(__name__)


def serialize_filters(filters: Dict[str, Any]) -> Dict[str, str]:
    """
    Convert order filters to query string parameters.

    Lists are comma-joined, datetimes ISO-8601 formatted and booleans
    lower-cased. None values are dropped.
    """
    params = {}

    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            params[key] = ",".join(str(item) for item in value)
        elif isinstance(value, datetime):
            params[key] = value.isoformat()
        elif isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = str(value)

    return params


class MarketplaceOrderClient(BaseMarketplaceClient):
    """Client for the order endpoints of the marketplace API."""

    def _orders_path(self, store_id: int) -> str:
        return f"/v1/store/{store_id}/order"

    async def get_orders(self, store_id: int, filters: Dict[str, Any]) -> List[ApiOrder]:
        """
        List every order of a store matching the filters, across all pages.

        Args:
            store_id: Marketplace store ID
            filters: Order filters (see serialize_filters)

        Returns:
            List[ApiOrder]: Orders in API order
        """
        path = self._orders_path(store_id)
        params = serialize_filters(filters)
        params["limit"] = str(self.settings.MARKETPLACE_PAGE_SIZE)

        orders: List[ApiOrder] = []
        page = 1

        while True:
            data = await self._request("GET", path, params={**params, "page": str(page)})

            page_orders = data.get("_embedded", {}).get("order", [])
            orders.extend(ApiOrder.from_payload(payload) for payload in page_orders)

            pages = int(data.get("pages") or 1)
            if page >= pages or not page_orders:
                break
            page += 1

        logger.debug(f"Fetched {len(orders)} order(s) for marketplace store {store_id} with filters {params}")
        return orders

    async def execute_operation(self, store_id: int, operation: OrderOperation) -> OperationResult:
        """
        Post every operation type of a batch to its endpoint.

        Args:
            store_id: Marketplace store ID
            operation: Batch of order operations

        Returns:
            OperationResult: Tickets returned for all operation types, in posting order
        """
        tickets: List[ApiTicket] = []

        for operation_type in operation.operation_types:
            entries = operation.get_entries(operation_type)
            path = f"{self._orders_path(store_id)}/{operation_type}"

            logger.info(f"Executing {operation_type} on {len(entries)} order(s) for marketplace store {store_id}")
            data = await self._request("POST", path, payload={"order": entries})

            for payload in data.get("_embedded", {}).get("ticket", []):
                tickets.append(ApiTicket.from_payload(payload))

        return OperationResult(tickets=tickets)
