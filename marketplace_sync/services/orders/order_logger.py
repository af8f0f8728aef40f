"""
OrderLogger - Appends entries to a marketplace order history.
"""

from marketplace_sync.domain.models import LogType, MarketplaceOrder, OrderLog
from marketplace_sync.services.orders.interfaces import ILogRepository


class OrderLogger:
    """Writes debug/info/error entries to the order log repository, unbuffered."""

    def __init__(self, log_repository: ILogRepository):
        self.log_repository = log_repository

    async def log(self, order: MarketplaceOrder, type: LogType, message: str, details: str = "") -> OrderLog:
        """
        Persist a log entry for an order.

        Raises:
            CouldNotSaveException: If the entry could not be saved
        """
        entry = OrderLog(order_id=order.id, type=type, message=message, details=details)
        return await self.log_repository.save(entry)

    async def log_debug(self, order: MarketplaceOrder, message: str, details: str = "") -> OrderLog:
        return await self.log(order, LogType.DEBUG, message, details)

    async def log_info(self, order: MarketplaceOrder, message: str, details: str = "") -> OrderLog:
        return await self.log(order, LogType.INFO, message, details)

    async def log_error(self, order: MarketplaceOrder, message: str, details: str = "") -> OrderLog:
        return await self.log(order, LogType.ERROR, message, details)
