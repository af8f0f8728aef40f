"""
OrderRepository: Marketplace order queries.

Every query is described by an immutable OrderQuerySpec, turned into SQL
by build_order_query.
"""

import logging
from typing import Any

from marketplace_sync.db.repositories.base import (
    ORDER_TABLE,
    ORDER_TICKET_TABLE,
    SALES_ORDER_TABLE,
    SALES_SHIPMENT_TRACK_TABLE,
    BaseRepository,
    log_operation,
    with_retry,
)
from marketplace_sync.domain.models import MarketplaceOrder, TicketAction
from marketplace_sync.services.orders.query_spec import OrderQuerySpec

logger = logging.getLogger(__name__)

SALES_ORDER_STATE_CANCELED = "canceled"
SALES_ORDER_SHIPPED_STATES = ("complete", "processing")


def _no_ticket_clause(param_name: str) -> str:
    return (
        f"NOT EXISTS (SELECT 1 FROM {ORDER_TICKET_TABLE} AS t "
        f"WHERE t.order_id = o.order_id AND t.action = :{param_name})"
    )


def _in_clause(column: str, prefix: str, values: tuple, params: dict[str, Any]) -> str:
    """Expand `column IN (...)` with one bound parameter per value."""
    names = []
    for index, value in enumerate(values):
        name = f"{prefix}_{index}"
        params[name] = value
        names.append(f":{name}")
    return f"{column} IN ({', '.join(names)})"


def build_order_query(spec: OrderQuerySpec) -> tuple[str, dict[str, Any]]:
    """
    Build the SQL query for an OrderQuerySpec.

    Args:
        spec: Filters and pagination

    Returns:
        tuple: (SQL string, bound parameters)
    """
    conditions: list[str] = []
    params: dict[str, Any] = {}

    if spec.store_id is not None:
        conditions.append("o.store_id = :store_id")
        params["store_id"] = spec.store_id

    if spec.is_imported is True:
        conditions.append("o.sales_order_id IS NOT NULL")
    elif spec.is_imported is False:
        conditions.append("o.sales_order_id IS NULL")

    if spec.is_importable:
        conditions.append("o.import_remaining_try_count > 0")

    if spec.created_from is not None:
        conditions.append("o.created_at >= :created_from")
        params["created_from"] = spec.created_from

    if spec.shopping_feed_statuses is not None:
        if spec.shopping_feed_statuses:
            conditions.append(_in_clause("o.shopping_feed_status", "status", spec.shopping_feed_statuses, params))
        else:
            conditions.append("1 = 0")

    if spec.notifiable_import:
        conditions.append("o.sales_order_id IS NOT NULL")
        conditions.append(_no_ticket_clause("import_action"))
        params["import_action"] = TicketAction.ACKNOWLEDGE_SUCCESS.value

    if spec.notifiable_cancellation:
        conditions.append("o.sales_order_id IS NOT NULL")
        conditions.append("so.state = :canceled_state")
        conditions.append(_no_ticket_clause("cancel_action"))
        params["canceled_state"] = SALES_ORDER_STATE_CANCELED
        params["cancel_action"] = TicketAction.CANCEL.value

    if spec.notifiable_shipment:
        conditions.append("o.sales_order_id IS NOT NULL")
        conditions.append(_in_clause("so.state", "shipped_state", SALES_ORDER_SHIPPED_STATES, params))
        conditions.append(
            f"EXISTS (SELECT 1 FROM {SALES_SHIPMENT_TRACK_TABLE} AS st WHERE st.order_id = o.sales_order_id)"
        )
        conditions.append(_no_ticket_clause("ship_action"))
        params["ship_action"] = TicketAction.SHIP.value

    if spec.is_fulfilled is not None:
        conditions.append("o.is_fulfilled = :is_fulfilled")
        params["is_fulfilled"] = spec.is_fulfilled

    query = (
        "SELECT o.*, so.increment_id AS sales_increment_id, so.state AS sales_order_state "
        f"FROM {ORDER_TABLE} AS o "
        f"LEFT JOIN {SALES_ORDER_TABLE} AS so ON so.entity_id = o.sales_order_id"
    )

    if conditions:
        query += " WHERE " + " AND ".join(conditions)

    query += " ORDER BY o.order_id ASC"

    if spec.page_size is not None:
        query += " LIMIT :limit OFFSET :offset"
        params["limit"] = spec.page_size
        params["offset"] = ((spec.page or 1) - 1) * spec.page_size

    return query, params


class OrderRepository(BaseRepository):
    """Repository for marketplace order queries."""

    @log_operation("verify_table_access_orders")
    async def _verify_table_access(self) -> None:
        await self._verify_tables(ORDER_TABLE, ORDER_TICKET_TABLE, SALES_ORDER_TABLE, SALES_SHIPMENT_TRACK_TABLE)

    @with_retry(max_attempts=3, delay=1.0)
    @log_operation()
    async def query(self, spec: OrderQuerySpec) -> list[MarketplaceOrder]:
        """
        Get the orders matching an OrderQuerySpec, ordered by ID.

        Raises:
            DatabaseConnectionException: If the query fails
        """
        query, params = build_order_query(spec)
        rows = await self.fetch_all(query, params)
        return [MarketplaceOrder.from_row(row) for row in rows]
