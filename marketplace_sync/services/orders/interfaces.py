"""
Interfaces/Protocols for order services (Dependency Inversion Principle).

These protocols define the contracts of the collaborators the order
services depend on, allowing for loose coupling and easy testing.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol

from marketplace_sync.domain.models import (
    ApiOrder,
    MarketplaceOrder,
    OperationResult,
    OrderLog,
    OrderOperation,
    ShipmentTrack,
    Store,
    Ticket,
)
from marketplace_sync.services.orders.query_spec import OrderQuerySpec


class IOrderApi(Protocol):
    """Protocol for the order API of a marketplace store."""

    async def get_all(self, filters: dict[str, Any]) -> list[ApiOrder]:
        """List all orders matching the given filters."""
        ...

    async def execute(self, operation: OrderOperation) -> OperationResult:
        """Execute an order operation and return its tickets."""
        ...


class IStoreApiResource(Protocol):
    """Protocol for a marketplace store handle."""

    def get_order_api(self) -> IOrderApi:
        """Get the order API of the store."""
        ...


class IApiSessionManager(Protocol):
    """Protocol for the marketplace API session provider."""

    def get_store_api_resource(self, store: Store) -> IStoreApiResource:
        """Get the API handle of a store."""
        ...


class IOrderRepository(Protocol):
    """Protocol for local marketplace order queries."""

    async def query(self, spec: OrderQuerySpec) -> list[MarketplaceOrder]:
        """Return the orders matching an OrderQuerySpec."""
        ...


class ITicketRepository(Protocol):
    """Protocol for ticket persistence."""

    async def save(self, ticket: Ticket) -> Ticket:
        """Persist a ticket, raising CouldNotSaveException on failure."""
        ...


class ILogRepository(Protocol):
    """Protocol for order log persistence."""

    async def save(self, log: OrderLog) -> OrderLog:
        """Persist a log entry, raising CouldNotSaveException on failure."""
        ...


class IShipmentTrackCollector(Protocol):
    """Protocol for shipment track lookups."""

    async def get_tracks_for_sales_orders(self, sales_order_ids: Iterable[int]) -> dict[int, list[ShipmentTrack]]:
        """Return the shipment tracks of each sales order, keyed by sales order ID."""
        ...


class IOrderConfig(Protocol):
    """Protocol for per-store order settings."""

    def get_import_from_date(self, store: Store) -> datetime:
        ...

    def get_syncing_from_date(self, store: Store) -> datetime:
        ...

    def get_refusal_syncing_action(self, store: Store) -> str:
        ...

    def get_cancellation_syncing_action(self, store: Store) -> str:
        ...

    def get_refund_syncing_action(self, store: Store) -> str:
        ...
