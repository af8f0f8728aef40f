"""
Commerce Database Repository Package.

Repository classes following the Single Responsibility Principle for the
marketplace order tables of the commerce database.

Repository Structure:
- BaseRepository: Abstract base with connection management
- OrderRepository: Marketplace order queries (OrderQuerySpec)
- TicketRepository: Marketplace order tickets
- LogRepository: Marketplace order history
- ShipmentTrackRepository: Sales order shipment tracks
- StoreRepository: Account stores synchronized with the marketplace
"""

from .base import BaseRepository
from .log_repository import LogRepository
from .order_repository import OrderRepository, build_order_query
from .shipment_track_repository import ShipmentTrackRepository, compute_track_relevance
from .store_repository import StoreRepository
from .ticket_repository import TicketRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "build_order_query",
    "TicketRepository",
    "LogRepository",
    "ShipmentTrackRepository",
    "compute_track_relevance",
    "StoreRepository",
]
