"""
Store domain model.

A store links a local account store to its marketplace-side store, and
carries the per-store order synchronization settings.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Store:
    """
    Account store synchronized with the marketplace.

    Attributes:
        id: Local store ID
        shopping_feed_store_id: Store ID on the marketplace API
        name: Display name
        configuration: Per-store order settings (see StoreOrderConfig)
    """

    id: int
    shopping_feed_store_id: int
    name: str = ""
    configuration: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.name or 'store'}#{self.id}"
