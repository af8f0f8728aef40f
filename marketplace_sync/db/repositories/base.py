"""
Base Repository for commerce database operations.

This module provides an abstract base class for all repository classes,
implementing common functionality like connection management, session
handling, retries and table access verification.
"""

import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_sync.db.connection import ConnDB, get_db_connection
from marketplace_sync.utils.error_handler import DatabaseConnectionException

logger = logging.getLogger(__name__)

# Table names
ORDER_TABLE = "sfm_marketplace_order"
ORDER_TICKET_TABLE = "sfm_marketplace_order_ticket"
ORDER_LOG_TABLE = "sfm_marketplace_order_log"
ACCOUNT_STORE_TABLE = "sfm_account_store"
SALES_ORDER_TABLE = "sales_order"
SALES_SHIPMENT_TRACK_TABLE = "sales_shipment_track"


def with_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple = (DatabaseConnectionException,),
) -> Callable:
    """
    Decorator for retrying read operations with exponential backoff.

    Never apply it to writes: a write that failed after reaching the
    database could be applied twice.

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for exponential backoff
        exceptions: Tuple of exceptions to catch and retry

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts - 1:
                        logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    logger.warning(
                        f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {e}. "
                        f"Retrying in {current_delay:.1f}s..."
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

        return wrapper

    return decorator


def log_operation(operation_name: str = None) -> Callable:
    """
    Decorator for logging database operations.

    Args:
        operation_name: Optional custom name for the operation

    Returns:
        Decorated function with logging
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            op_name = operation_name or f"{self.__class__.__name__}.{func.__name__}"
            logger.debug(f"Starting operation: {op_name}")

            try:
                result = await func(self, *args, **kwargs)
                logger.debug(f"Operation successful: {op_name}")
                return result
            except Exception as e:
                logger.error(f"Operation failed: {op_name} - {e}")
                raise

        return wrapper

    return decorator


class BaseRepository(ABC):
    """
    Abstract base repository for commerce database operations.

    Provides common functionality for all repository classes:
    - Connection management with pooling
    - Session handling with context managers
    - Table access verification
    """

    def __init__(self, conn_db: Optional[ConnDB] = None):
        """
        Initialize the base repository.

        Args:
            conn_db: Optional database connection. If not provided, uses global connection.
        """
        self.conn_db: ConnDB = conn_db or get_db_connection()
        self._initialized: bool = False
        self._repository_name: str = self.__class__.__name__

    @log_operation("repository_initialization")
    async def initialize(self) -> None:
        """
        Initialize the repository ensuring database connection is available.

        Raises:
            DatabaseConnectionException: If initialization fails
        """
        if not self.conn_db.is_initialized():
            await self.conn_db.initialize()

        await self._verify_table_access()

        self._initialized = True
        logger.info(f"{self._repository_name} initialized successfully")

    @abstractmethod
    async def _verify_table_access(self) -> None:
        """
        Verify access to the tables required by this repository.

        Raises:
            DatabaseConnectionException: If table access verification fails
        """

    async def _verify_tables(self, *tables: str) -> None:
        try:
            async with self.conn_db.get_session() as session:
                for table in tables:
                    await session.execute(text(f"SELECT 1 FROM {table} WHERE 1 = 0"))
        except Exception as e:
            logger.error(f"{self._repository_name} table access verification failed: {e}")
            raise DatabaseConnectionException(
                message=f"Cannot access tables {', '.join(tables)}: {str(e)}",
                connection_type="table_access",
            ) from e

    async def close(self) -> None:
        """
        Close the repository.

        Note: The actual connection is managed by the ConnDB singleton,
        so we only mark the repository as uninitialized.
        """
        self._initialized = False

    def is_initialized(self) -> bool:
        return self._initialized and self.conn_db.is_initialized()

    def get_session(self) -> AsyncSession:
        """
        Get a database session from the connection pool.

        Raises:
            DatabaseConnectionException: If repository is not initialized
        """
        if not self.is_initialized():
            raise DatabaseConnectionException(
                message=f"{self._repository_name} not initialized",
                connection_type="session_acquisition",
            )

        return self.conn_db.get_session()

    async def fetch_all(self, query: str, params: Optional[Dict[str, Any]] = None) -> list[dict[str, Any]]:
        """
        Execute a read query and return its rows as mappings.

        Raises:
            DatabaseConnectionException: If query execution fails
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(text(query), params or {})
                return [dict(row) for row in result.mappings().all()]
        except DatabaseConnectionException:
            raise
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise DatabaseConnectionException(
                message=f"Query execution failed: {str(e)}",
                connection_type="query_execution",
            ) from e

    def __repr__(self) -> str:
        return f"<{self._repository_name}(initialized={self._initialized})>"
