"""
LogRepository: Marketplace order history.
"""

import dataclasses
import logging

from sqlalchemy import text

from marketplace_sync.db.repositories.base import ORDER_LOG_TABLE, BaseRepository, log_operation
from marketplace_sync.domain.models import OrderLog
from marketplace_sync.utils.error_handler import CouldNotSaveException

logger = logging.getLogger(__name__)


class LogRepository(BaseRepository):
    """Append-only repository for order history entries."""

    @log_operation("verify_table_access_logs")
    async def _verify_table_access(self) -> None:
        await self._verify_tables(ORDER_LOG_TABLE)

    @log_operation()
    async def save(self, entry: OrderLog) -> OrderLog:
        """
        Insert an order history entry.

        Raises:
            CouldNotSaveException: If the entry could not be saved
        """
        query = f"""
        INSERT INTO {ORDER_LOG_TABLE} (order_id, type, message, details, created_at)
        VALUES (:order_id, :type, :message, :details, :created_at)
        RETURNING log_id
        """

        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), entry.to_dict())
                log_id = result.scalar()
                await session.commit()
        except Exception as e:
            logger.error(f"Error saving log entry for order {entry.order_id}: {e}")
            raise CouldNotSaveException(
                message=f"Could not save log entry for order {entry.order_id}: {str(e)}",
                entity="order_log",
            ) from e

        return dataclasses.replace(entry, id=int(log_id))
