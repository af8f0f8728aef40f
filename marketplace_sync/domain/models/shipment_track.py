"""
Shipment track value object.

Tracks are owned by the commerce backend; they are only read here to pick
the one reported to the marketplace.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShipmentTrack:
    """
    Shipment tracking record of a sales order.

    Attributes:
        sales_order_id: Commerce-backend sales order ID
        carrier_code: Carrier code (e.g. "ups", "custom")
        carrier_title: Carrier title reported to the marketplace
        tracking_number: Tracking number
        tracking_url: Tracking URL (may be empty)
        relevance: Score used to pick the best track of a sales order
    """

    sales_order_id: int
    carrier_code: str = ""
    carrier_title: str = ""
    tracking_number: str = ""
    tracking_url: str = ""
    relevance: int = 0
