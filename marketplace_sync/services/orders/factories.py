"""
Factories for the order notification services.

Wiring of the query engine and the notifier is kept here so that callers
(scheduler, CLI, tests) only provide the collaborators they care about.
"""

from typing import Optional

from marketplace_sync.db.connection import ConnDB
from marketplace_sync.db.repositories import (
    LogRepository,
    OrderRepository,
    ShipmentTrackRepository,
    TicketRepository,
)
from marketplace_sync.services.orders.interfaces import (
    IApiSessionManager,
    ILogRepository,
    IOrderConfig,
    IOrderRepository,
    IShipmentTrackCollector,
    ITicketRepository,
)
from marketplace_sync.services.orders.notifier import OrderNotifier
from marketplace_sync.services.orders.order_config import OrderConfig
from marketplace_sync.services.orders.order_logger import OrderLogger
from marketplace_sync.services.orders.query_engine import OrderQueryEngine
from marketplace_sync.services.orders.ticket_registrar import TicketRegistrar


class OrderServiceFactory:
    """Factory for the order services, with default settings-based configuration."""

    @staticmethod
    def create_query_engine(
        api_session_manager: IApiSessionManager,
        order_repository: IOrderRepository,
        order_config: Optional[IOrderConfig] = None,
    ) -> OrderQueryEngine:
        """Create a query engine, using OrderConfig when no configuration is given."""
        return OrderQueryEngine(
            api_session_manager=api_session_manager,
            order_config=order_config or OrderConfig(),
            order_repository=order_repository,
        )

    @staticmethod
    def create_notifier(
        api_session_manager: IApiSessionManager,
        order_repository: IOrderRepository,
        ticket_repository: ITicketRepository,
        log_repository: ILogRepository,
        shipment_track_collector: IShipmentTrackCollector,
        order_config: Optional[IOrderConfig] = None,
    ) -> OrderNotifier:
        """
        Create a notifier from its storage and API collaborators.

        Args:
            api_session_manager: Provider of per-store marketplace API handles
            order_repository: Local marketplace order queries
            ticket_repository: Ticket storage
            log_repository: Order history storage
            shipment_track_collector: Bulk shipment track lookup
            order_config: Optional per-store order settings

        Returns:
            OrderNotifier: Ready to use notifier
        """
        return OrderNotifier(
            api_session_manager=api_session_manager,
            query_engine=OrderServiceFactory.create_query_engine(api_session_manager, order_repository, order_config),
            ticket_registrar=TicketRegistrar(ticket_repository),
            shipment_track_collector=shipment_track_collector,
            order_logger=OrderLogger(log_repository),
        )


async def create_notifier(api_session_manager: IApiSessionManager, conn_db: Optional[ConnDB] = None) -> OrderNotifier:
    """
    Create a notifier backed by the commerce database repositories.

    Repositories are initialized (connection and table access checked)
    before the notifier is returned.

    Raises:
        DatabaseConnectionException: If the database or a table is unreachable
    """
    order_repository = OrderRepository(conn_db)
    ticket_repository = TicketRepository(conn_db)
    log_repository = LogRepository(conn_db)
    shipment_track_repository = ShipmentTrackRepository(conn_db)

    for repository in (order_repository, ticket_repository, log_repository, shipment_track_repository):
        await repository.initialize()

    return OrderServiceFactory.create_notifier(
        api_session_manager=api_session_manager,
        order_repository=order_repository,
        ticket_repository=ticket_repository,
        log_repository=log_repository,
        shipment_track_collector=shipment_track_repository,
    )
