"""
Ticket domain model.

A ticket is the marketplace receipt for an order operation, persisted
locally as proof that the operation was communicated.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class TicketAction(str, Enum):
    """Order operation a ticket was issued for."""

    ACKNOWLEDGE_SUCCESS = "acknowledge_success"
    ACKNOWLEDGE_FAILURE = "acknowledge_failure"
    CANCEL = "cancel"
    SHIP = "ship"


class TicketStatus(str, Enum):
    """Processing status of a ticket."""

    PENDING = "pending"
    HANDLED = "handled"
    FAILED = "failed"


@dataclass(frozen=True)
class Ticket:
    """
    Immutable record of a marketplace operation receipt.

    Attributes:
        shopping_feed_ticket_id: Ticket ID issued by the marketplace
        order_id: Local marketplace order ID
        action: Operation the ticket acknowledges
        status: Ticket status
        created_at: Registration date
        id: Local ticket ID (None until saved)
    """

    shopping_feed_ticket_id: str
    order_id: int
    action: TicketAction
    status: TicketStatus = TicketStatus.HANDLED
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: int | None = None

    def __post_init__(self) -> None:
        """Validate ticket data after initialization."""
        if not self.shopping_feed_ticket_id:
            raise ValueError("Ticket ID is required")

    def to_dict(self) -> dict[str, Any]:
        """Convert ticket to dictionary for persistence."""
        return {
            "shopping_feed_ticket_id": self.shopping_feed_ticket_id,
            "order_id": self.order_id,
            "action": self.action.value,
            "status": self.status.value,
            "created_at": self.created_at,
        }
