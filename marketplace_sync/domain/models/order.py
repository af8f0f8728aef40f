"""
Marketplace order domain model.

Represents a marketplace order mirrored into the commerce backend.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


class ShoppingFeedStatus:
    """Order statuses as reported by the marketplace."""

    CREATED = "created"
    WAITING_STORE_ACCEPTANCE = "waiting_store_acceptance"
    REFUSED = "refused"
    WAITING_SHIPMENT = "waiting_shipment"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    PARTIALLY_SHIPPED = "partially_shipped"


@dataclass
class MarketplaceOrder:
    """
    Domain model representing a marketplace order known locally.

    Attributes:
        store_id: Local store (account store) ID
        shopping_feed_order_id: Order ID on the marketplace side
        marketplace_order_number: Order reference on the marketplace
        marketplace_name: Channel name (e.g. "Amazon", "ManoMano")
        channel_id: Channel ID on the marketplace side
        shopping_feed_status: Current marketplace status
        sales_order_id: Linked commerce-backend sales order (None until imported)
        sales_increment_id: Increment ID of the linked sales order
        sales_order_state: State of the linked sales order (e.g. "canceled", "complete")
        is_fulfilled: Whether the marketplace fulfills the order itself
        import_remaining_try_count: Import attempts left before giving up
        created_at: Marketplace creation date
        id: Local order ID (None for new orders)
    """

    store_id: int
    marketplace_order_number: str
    marketplace_name: str
    shopping_feed_order_id: int | None = None
    channel_id: int | None = None
    shopping_feed_status: str = ShoppingFeedStatus.CREATED
    sales_order_id: int | None = None
    sales_increment_id: str | None = None
    sales_order_state: str | None = None
    is_fulfilled: bool = False
    import_remaining_try_count: int = 3
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None
    acknowledged_at: datetime | None = None
    fetched_at: datetime | None = None
    id: int | None = None

    @property
    def is_imported(self) -> bool:
        """Check if the order has been imported into the commerce backend."""
        return self.sales_order_id is not None

    @property
    def is_importable(self) -> bool:
        """Check if the order can still be imported."""
        return not self.is_imported and self.import_remaining_try_count > 0

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MarketplaceOrder":
        """Create an order from a database row mapping."""
        return cls(
            id=row.get("order_id"),
            store_id=row["store_id"],
            shopping_feed_order_id=row.get("shopping_feed_order_id"),
            marketplace_order_number=row["marketplace_order_number"],
            marketplace_name=row["marketplace_name"],
            channel_id=row.get("shopping_feed_marketplace_id"),
            shopping_feed_status=row.get("shopping_feed_status") or ShoppingFeedStatus.CREATED,
            sales_order_id=row.get("sales_order_id"),
            sales_increment_id=row.get("sales_increment_id"),
            sales_order_state=row.get("sales_order_state"),
            is_fulfilled=bool(row.get("is_fulfilled", False)),
            import_remaining_try_count=row.get("import_remaining_try_count", 0) or 0,
            created_at=row.get("created_at") or datetime.now(UTC),
            updated_at=row.get("updated_at"),
            acknowledged_at=row.get("acknowledged_at"),
            fetched_at=row.get("fetched_at"),
        )
