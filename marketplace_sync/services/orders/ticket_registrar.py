"""
TicketRegistrar - Durable proof that a marketplace operation was communicated.
"""

import logging
from dataclasses import dataclass

from marketplace_sync.domain.models import ApiTicket, MarketplaceOrder, Ticket, TicketAction, TicketStatus
from marketplace_sync.services.orders.interfaces import ITicketRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketRegistration:
    """Outcome of a ticket registration: the saved ticket, or the save error."""

    ticket: Ticket | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Ticket:
        """Return the saved ticket, or raise the save error."""
        if self.error is not None:
            raise self.error
        return self.ticket


class TicketRegistrar:
    """Records marketplace tickets against local orders."""

    def __init__(self, ticket_repository: ITicketRepository):
        self.ticket_repository = ticket_repository

    async def register(self, order: MarketplaceOrder, api_ticket: ApiTicket, action: TicketAction) -> TicketRegistration:
        """
        Persist a handled ticket for an order.

        Args:
            order: Order the operation was performed on
            api_ticket: Ticket returned by the marketplace
            action: Operation the ticket acknowledges

        Returns:
            TicketRegistration: The saved ticket, or the error raised while
                saving it
        """
        ticket = Ticket(
            shopping_feed_ticket_id=api_ticket.id.strip(),
            order_id=order.id,
            action=action,
            status=TicketStatus.HANDLED,
        )

        try:
            saved = await self.ticket_repository.save(ticket)
        except Exception as e:
            logger.error(f"Could not save {action.value} ticket {ticket.shopping_feed_ticket_id} for order {order.id}: {e}")
            return TicketRegistration(error=e)

        logger.debug(f"Registered {action.value} ticket {ticket.shopping_feed_ticket_id} for order {order.id}")
        return TicketRegistration(ticket=saved)
