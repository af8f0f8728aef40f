"""
ShipmentTrackRepository: Sales order shipment tracks.

Implements the bulk track lookup used by the shipment notifications, and
scores every track so that the best one of a sales order can be picked.
"""

import logging
from collections.abc import Iterable
from typing import Any

from marketplace_sync.db.repositories.base import SALES_SHIPMENT_TRACK_TABLE, BaseRepository, log_operation, with_retry
from marketplace_sync.domain.models import ShipmentTrack

logger = logging.getLogger(__name__)

RELEVANCE_TRACKING_NUMBER = 4
RELEVANCE_TRACKING_URL = 2
RELEVANCE_CARRIER_TITLE = 1


def compute_track_relevance(carrier_title: str, tracking_number: str, tracking_url: str) -> int:
    """
    Score a track by the information it carries.

    A tracking number outweighs a URL and a carrier title combined.
    """
    relevance = 0

    if tracking_number.strip():
        relevance += RELEVANCE_TRACKING_NUMBER
    if tracking_url.strip():
        relevance += RELEVANCE_TRACKING_URL
    if carrier_title.strip():
        relevance += RELEVANCE_CARRIER_TITLE

    return relevance


def _track_from_row(row: dict[str, Any]) -> ShipmentTrack:
    carrier_title = row.get("title") or ""
    tracking_number = row.get("track_number") or ""
    tracking_url = row.get("track_url") or ""

    return ShipmentTrack(
        sales_order_id=int(row["order_id"]),
        carrier_code=row.get("carrier_code") or "",
        carrier_title=carrier_title,
        tracking_number=tracking_number,
        tracking_url=tracking_url,
        relevance=compute_track_relevance(carrier_title, tracking_number, tracking_url),
    )


class ShipmentTrackRepository(BaseRepository):
    """Read-only repository over the commerce backend shipment tracks."""

    @log_operation("verify_table_access_tracks")
    async def _verify_table_access(self) -> None:
        await self._verify_tables(SALES_SHIPMENT_TRACK_TABLE)

    @with_retry(max_attempts=3, delay=1.0)
    @log_operation()
    async def get_tracks_for_sales_orders(self, sales_order_ids: Iterable[int]) -> dict[int, list[ShipmentTrack]]:
        """
        Get the shipment tracks of several sales orders in one query.

        Tracks of a sales order are listed in creation order. Sales orders
        without any track are absent from the result.

        Args:
            sales_order_ids: Commerce-backend sales order IDs

        Returns:
            dict: Tracks grouped by sales order ID
        """
        ids = sorted({int(sales_order_id) for sales_order_id in sales_order_ids})

        if not ids:
            return {}

        params = {f"sales_order_{index}": sales_order_id for index, sales_order_id in enumerate(ids)}
        placeholders = ", ".join(f":{name}" for name in params)
        query = f"""
        SELECT entity_id, order_id, carrier_code, title, track_number, track_url
        FROM {SALES_SHIPMENT_TRACK_TABLE}
        WHERE order_id IN ({placeholders})
        ORDER BY entity_id ASC
        """

        tracks: dict[int, list[ShipmentTrack]] = {}

        for row in await self.fetch_all(query, params):
            track = _track_from_row(row)
            tracks.setdefault(track.sales_order_id, []).append(track)

        logger.debug(f"Loaded shipment tracks for {len(tracks)}/{len(ids)} sales order(s)")
        return tracks
