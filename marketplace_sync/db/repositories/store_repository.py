"""
StoreRepository: Account stores synchronized with the marketplace.
"""

import json
import logging
from typing import Any, Optional

from marketplace_sync.db.repositories.base import ACCOUNT_STORE_TABLE, BaseRepository, log_operation, with_retry
from marketplace_sync.domain.models import Store

logger = logging.getLogger(__name__)


def _parse_configuration(raw: Any, store_id: int) -> dict[str, Any]:
    if not raw:
        return {}

    if isinstance(raw, dict):
        return raw

    try:
        configuration = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid configuration for store {store_id}, using defaults: {e}")
        return {}

    # Order settings may be nested under an "order" section
    if isinstance(configuration, dict):
        return configuration.get("order", configuration)

    return {}


def _store_from_row(row: dict[str, Any]) -> Store:
    store_id = int(row["store_id"])
    return Store(
        id=store_id,
        shopping_feed_store_id=int(row["shopping_feed_store_id"]),
        name=row.get("shopping_feed_name") or "",
        configuration=_parse_configuration(row.get("configuration"), store_id),
    )


class StoreRepository(BaseRepository):
    """Repository for account stores."""

    @log_operation("verify_table_access_stores")
    async def _verify_table_access(self) -> None:
        await self._verify_tables(ACCOUNT_STORE_TABLE)

    @with_retry(max_attempts=3, delay=1.0)
    @log_operation()
    async def get_active_stores(self, store_ids: Optional[list[int]] = None) -> list[Store]:
        """
        Get the account stores linked to a marketplace store.

        Args:
            store_ids: Optional restriction to these local store IDs

        Returns:
            list: Stores ordered by ID
        """
        query = f"""
        SELECT store_id, shopping_feed_store_id, shopping_feed_name, configuration
        FROM {ACCOUNT_STORE_TABLE}
        WHERE shopping_feed_store_id IS NOT NULL
        """
        params: dict[str, Any] = {}

        if store_ids:
            params = {f"store_{index}": store_id for index, store_id in enumerate(store_ids)}
            query += f" AND store_id IN ({', '.join(f':{name}' for name in params)})"

        query += " ORDER BY store_id ASC"

        stores = [_store_from_row(row) for row in await self.fetch_all(query, params)]
        logger.info(f"Loaded {len(stores)} store(s) to synchronize")
        return stores

    @with_retry(max_attempts=3, delay=1.0)
    @log_operation()
    async def get_store(self, store_id: int) -> Optional[Store]:
        """Get a single account store, or None if it does not exist."""
        query = f"""
        SELECT store_id, shopping_feed_store_id, shopping_feed_name, configuration
        FROM {ACCOUNT_STORE_TABLE}
        WHERE store_id = :store_id
        """
        rows = await self.fetch_all(query, {"store_id": store_id})
        return _store_from_row(rows[0]) if rows else None
