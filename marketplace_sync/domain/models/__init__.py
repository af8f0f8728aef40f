"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .order import MarketplaceOrder, ShoppingFeedStatus
from .order_log import LogType, OrderLog
from .remote import ApiOrder, ApiTicket, OperationResult, OrderOperation
from .shipment_track import ShipmentTrack
from .store import Store
from .ticket import Ticket, TicketAction, TicketStatus

__all__ = [
    "MarketplaceOrder",
    "ShoppingFeedStatus",
    "OrderLog",
    "LogType",
    "Ticket",
    "TicketAction",
    "TicketStatus",
    "ShipmentTrack",
    "Store",
    "ApiOrder",
    "ApiTicket",
    "OperationResult",
    "OrderOperation",
]
