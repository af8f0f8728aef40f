"""
Immutable query description for local marketplace orders.

A spec is a plain value: each optional field is one filter, unset fields
do not filter. Repositories turn a spec into SQL (see
OrderRepository.query), and tests can match on specs without a database.
"""

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class OrderQuerySpec:
    """
    Filters and pagination for a marketplace order query.

    Attributes:
        store_id: Restrict to a store
        is_imported: True for imported orders only, False for non-imported only
        is_importable: Only orders that still have import attempts left
        created_from: Only orders created on or after this date
        shopping_feed_statuses: Only orders whose marketplace status is in this set
        notifiable_import: Only imported orders not yet acknowledged as such
        notifiable_cancellation: Only canceled orders not yet notified
        notifiable_shipment: Only shipped orders not yet notified
        is_fulfilled: Restrict on the "fulfilled by the marketplace" flag
        page: Page number (1-based), used with page_size
        page_size: Maximum number of orders returned
    """

    store_id: int | None = None
    is_imported: bool | None = None
    is_importable: bool = False
    created_from: datetime | None = None
    shopping_feed_statuses: tuple[str, ...] | None = None
    notifiable_import: bool = False
    notifiable_cancellation: bool = False
    notifiable_shipment: bool = False
    is_fulfilled: bool | None = None
    page: int | None = None
    page_size: int | None = None

    def __post_init__(self) -> None:
        if self.page_size is not None and self.page_size < 1:
            raise ValueError(f"Page size must be positive: {self.page_size}")
        if self.page is not None and self.page < 1:
            raise ValueError(f"Page must be positive: {self.page}")

    def paginated(self, limit: int | None) -> "OrderQuerySpec":
        """Return the first page of `limit` orders, or the spec itself when limit is None."""
        if limit is None:
            return self
        return replace(self, page=1, page_size=limit)
