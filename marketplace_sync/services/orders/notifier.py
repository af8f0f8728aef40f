"""
OrderNotifier - Pushes local order events to the marketplace.

Every notification follows the same flow:
1. Build the order operation (acknowledge, cancel or ship)
2. Execute it on the store's order API
3. Register the first returned ticket against the local order

A registered ticket is what takes the order out of the notifiable sets, so
a run that stops half-way is resumed by the next scheduled run.

When the ticket of an acknowledgement cannot be saved, the acknowledgement
is reverted on the marketplace (unacknowledge) before the save error is
raised: the marketplace must not consider the order acknowledged while no
local proof exists. Cancellations and shipments have no inverse operation
in the marketplace protocol, so their save errors are raised as-is.
"""

import logging
from typing import Any

from marketplace_sync.domain.models import (
    MarketplaceOrder,
    OperationResult,
    OrderOperation,
    ShipmentTrack,
    Store,
    Ticket,
    TicketAction,
)
from marketplace_sync.services.orders.interfaces import IApiSessionManager, IOrderApi, IShipmentTrackCollector
from marketplace_sync.services.orders.order_logger import OrderLogger
from marketplace_sync.services.orders.query_engine import OrderQueryEngine
from marketplace_sync.services.orders.ticket_registrar import TicketRegistrar, TicketRegistration
from marketplace_sync.services.orders.track_selector import select_best_track

logger = logging.getLogger(__name__)

API_ACKNOWLEDGEMENT_STATUS_SUCCESS = "success"
API_ACKNOWLEDGEMENT_STATUS_FAILURE = "error"

# Actions whose ticket save failure is compensated by an unacknowledge call
COMPENSATED_ACTIONS = frozenset({TicketAction.ACKNOWLEDGE_SUCCESS, TicketAction.ACKNOWLEDGE_FAILURE})


class OrderNotifier:
    """
    Orchestrates acknowledgement, cancellation and shipment notifications.

    Orders are processed one at a time, in query order. Errors are never
    caught per order: the first failure stops the current run.
    """

    def __init__(
        self,
        api_session_manager: IApiSessionManager,
        query_engine: OrderQueryEngine,
        ticket_registrar: TicketRegistrar,
        shipment_track_collector: IShipmentTrackCollector,
        order_logger: OrderLogger,
    ):
        """
        Initialize notifier with its collaborators.

        Args:
            api_session_manager: Provider of per-store marketplace API handles
            query_engine: Source of notifiable orders
            ticket_registrar: Persists the tickets returned by the marketplace
            shipment_track_collector: Bulk lookup of sales order shipment tracks
            order_logger: Order history writer
        """
        self.api_session_manager = api_session_manager
        self.query_engine = query_engine
        self.ticket_registrar = ticket_registrar
        self.shipment_track_collector = shipment_track_collector
        self.order_logger = order_logger

    def _get_order_api(self, store: Store) -> IOrderApi:
        return self.api_session_manager.get_store_api_resource(store).get_order_api()

    async def _register_first_ticket(
        self, order: MarketplaceOrder, result: OperationResult, action: TicketAction
    ) -> TicketRegistration | None:
        """Register the first ticket of an operation result, or return None if it has none."""
        tickets = result.get_tickets()

        if not tickets:
            logger.debug(f"No ticket returned for {action.value} of order {order.id}")
            return None

        if len(tickets) > 1:
            ignored = ", ".join(ticket.id for ticket in tickets[1:])
            logger.warning(
                f"{len(tickets)} tickets returned for {action.value} of order {order.id}, "
                f"only the first one is registered (ignored: {ignored})"
            )

        return await self.ticket_registrar.register(order, tickets[0], action)

    async def _compensate_acknowledgement(self, order_api: IOrderApi, order: MarketplaceOrder) -> None:
        """Revert the acknowledgement of an order on the marketplace."""
        operation = OrderOperation()
        operation.unacknowledge(order.marketplace_order_number, order.marketplace_name)

        logger.warning(f"Reverting acknowledgement of order {order.id} ({order.marketplace_order_number})")

        try:
            await order_api.execute(operation)
        except Exception as e:
            # The save error stays the one reported to the caller.
            logger.error(f"Failed to unacknowledge order {order.id} ({order.marketplace_order_number}): {e}")

    async def _finish(
        self, order: MarketplaceOrder, action: TicketAction, registration: TicketRegistration | None
    ) -> Ticket | None:
        if registration is None:
            return None

        ticket = registration.raise_for_error()
        await self.order_logger.log_info(
            order,
            f"Notified {action.value.replace('_', ' ')} to the marketplace.",
            f"Ticket: {ticket.shopping_feed_ticket_id}",
        )
        return ticket

    # ------------------------- Single order notifications -------------------------
    async def notify_result(
        self, order: MarketplaceOrder, store_reference: str, action: TicketAction, store: Store
    ) -> Ticket | None:
        """
        Acknowledge the import result of an order.

        Args:
            order: Marketplace order
            store_reference: Local reference sent to the marketplace
            action: ACKNOWLEDGE_SUCCESS or ACKNOWLEDGE_FAILURE
            store: Store of the order

        Returns:
            Ticket | None: The registered ticket, or None if the marketplace returned none

        Raises:
            MarketplaceAPIException: If the marketplace call fails
            CouldNotSaveException: If the ticket could not be saved (after unacknowledging
                an acknowledgement). Other save errors are raised the same way.
        """
        order_api = self._get_order_api(store)

        if action == TicketAction.ACKNOWLEDGE_SUCCESS:
            api_status = API_ACKNOWLEDGEMENT_STATUS_SUCCESS
        else:
            api_status = API_ACKNOWLEDGEMENT_STATUS_FAILURE

        operation = OrderOperation()
        operation.acknowledge(order.marketplace_order_number, order.marketplace_name, store_reference, api_status)

        result = await order_api.execute(operation)
        registration = await self._register_first_ticket(order, result, action)

        if registration is not None and not registration.succeeded and action in COMPENSATED_ACTIONS:
            await self._compensate_acknowledgement(order_api, order)

        return await self._finish(order, action, registration)

    async def notify_import_success(
        self, order: MarketplaceOrder, sales_increment_id: str, store: Store
    ) -> Ticket | None:
        return await self.notify_result(order, sales_increment_id, TicketAction.ACKNOWLEDGE_SUCCESS, store)

    async def notify_import_failure(self, order: MarketplaceOrder, store: Store) -> Ticket | None:
        return await self.notify_result(order, str(order.id), TicketAction.ACKNOWLEDGE_FAILURE, store)

    async def notify_cancellation(self, order: MarketplaceOrder, store: Store) -> Ticket | None:
        """Notify the marketplace that an order was canceled locally."""
        operation = OrderOperation()
        operation.cancel(order.marketplace_order_number, order.marketplace_name)

        result = await self._get_order_api(store).execute(operation)
        registration = await self._register_first_ticket(order, result, TicketAction.CANCEL)

        return await self._finish(order, TicketAction.CANCEL, registration)

    async def notify_shipment(self, order: MarketplaceOrder, track: ShipmentTrack, store: Store) -> Ticket | None:
        """Notify the marketplace that an order was shipped, with its tracking information."""
        operation = OrderOperation()
        operation.ship(
            order.marketplace_order_number,
            order.marketplace_name,
            track.carrier_title,
            track.tracking_number,
            track.tracking_url,
        )

        result = await self._get_order_api(store).execute(operation)
        registration = await self._register_first_ticket(order, result, TicketAction.SHIP)

        return await self._finish(order, TicketAction.SHIP, registration)

    # ------------------------- Batch updates -------------------------
    async def notify_import_updates(self, store: Store) -> int:
        """Acknowledge every imported order of the store not yet acknowledged."""
        orders = await self.query_engine.find_notifiable_imports(store)
        logger.info(f"Store {store.id}: {len(orders)} import notification(s) to send")

        for order in orders:
            await self.notify_import_success(order, (order.sales_increment_id or "").strip(), store)

        return len(orders)

    async def notify_cancellation_updates(self, store: Store) -> int:
        """Notify every canceled order of the store not yet notified."""
        orders = await self.query_engine.find_notifiable_cancellations(store)
        logger.info(f"Store {store.id}: {len(orders)} cancellation notification(s) to send")

        for order in orders:
            await self.notify_cancellation(order, store)

        return len(orders)

    async def notify_shipment_updates(self, store: Store) -> int:
        """
        Notify every shipped order of the store not yet notified.

        Tracks are fetched in a single lookup for all candidate orders. Orders
        without any track are skipped until one is added.

        Returns:
            int: Number of orders notified
        """
        orders = await self.query_engine.find_notifiable_shipments(store)

        if not orders:
            logger.info(f"Store {store.id}: 0 shipment notification(s) to send")
            return 0

        sales_order_ids = {int(order.sales_order_id) for order in orders}
        tracks_by_sales_order = await self.shipment_track_collector.get_tracks_for_sales_orders(sales_order_ids)
        notified_count = 0

        for order in orders:
            tracks = tracks_by_sales_order.get(int(order.sales_order_id))

            if not tracks:
                logger.debug(f"No shipment track yet for order {order.id}, skipping")
                continue

            await self.notify_shipment(order, select_best_track(tracks), store)
            notified_count += 1

        logger.info(f"Store {store.id}: {notified_count}/{len(orders)} shipment notification(s) sent")
        return notified_count

    async def notify_all_updates(self, store: Store) -> dict[str, Any]:
        """
        Run import, cancellation then shipment notifications for a store.

        The first failure propagates and aborts the remaining phases.
        """
        logger.info(f"Starting order notifications for store {store.id}")

        summary = {
            "store_id": store.id,
            "imports": await self.notify_import_updates(store),
            "cancellations": await self.notify_cancellation_updates(store),
            "shipments": await self.notify_shipment_updates(store),
        }

        logger.info(f"Order notifications done for store {store.id}: {summary}")
        return summary
