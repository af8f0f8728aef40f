"""
TicketRepository: Marketplace order tickets.
"""

import dataclasses
import logging

from sqlalchemy import text

from marketplace_sync.db.repositories.base import ORDER_TICKET_TABLE, BaseRepository, log_operation
from marketplace_sync.domain.models import Ticket
from marketplace_sync.utils.error_handler import CouldNotSaveException

logger = logging.getLogger(__name__)


class TicketRepository(BaseRepository):
    """Repository for the tickets registered against marketplace orders."""

    @log_operation("verify_table_access_tickets")
    async def _verify_table_access(self) -> None:
        await self._verify_tables(ORDER_TICKET_TABLE)

    # Not retried: writes go through at most once.
    @log_operation()
    async def save(self, ticket: Ticket) -> Ticket:
        """
        Insert a ticket and return it with its local ID.

        Raises:
            CouldNotSaveException: If the ticket could not be saved
        """
        query = f"""
        INSERT INTO {ORDER_TICKET_TABLE} (
            shopping_feed_ticket_id, order_id, action, status, created_at
        )
        VALUES (
            :shopping_feed_ticket_id, :order_id, :action, :status, :created_at
        )
        RETURNING ticket_id
        """

        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), ticket.to_dict())
                ticket_id = result.scalar()
                await session.commit()
        except Exception as e:
            logger.error(f"Error saving ticket {ticket.shopping_feed_ticket_id} for order {ticket.order_id}: {e}")
            raise CouldNotSaveException(
                message=f"Could not save ticket {ticket.shopping_feed_ticket_id}: {str(e)}",
                entity="ticket",
            ) from e

        return dataclasses.replace(ticket, id=int(ticket_id))
