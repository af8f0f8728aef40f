"""
Marketplace API resources.

These objects mirror what the marketplace order API returns or expects.
They are never persisted locally.
"""

from dataclasses import dataclass, field
from typing import Any

from marketplace_sync.utils.error_handler import MarketplaceAPIException


class OperationType:
    """Order operation endpoints of the marketplace API."""

    ACKNOWLEDGE = "acknowledge"
    UNACKNOWLEDGE = "unacknowledge"
    CANCEL = "cancel"
    SHIP = "ship"


@dataclass(frozen=True)
class ApiTicket:
    """Ticket returned by the marketplace for an accepted operation."""

    id: str
    batch_id: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ApiTicket":
        """
        Create a ticket from its API representation.

        Raises:
            MarketplaceAPIException: If the ticket has no id
        """
        raw_id = payload.get("id")
        ticket_id = "" if raw_id is None else str(raw_id).strip()
        if not ticket_id:
            raise MarketplaceAPIException(f"Marketplace returned a ticket without id: {payload}")
        return cls(id=ticket_id, batch_id=payload.get("batchId"))


@dataclass(frozen=True)
class ApiOrder:
    """Order resource as listed by the marketplace API."""

    id: int
    reference: str
    channel_id: int | None = None
    channel_name: str = ""
    status: str = ""
    acknowledged_at: str | None = None
    payload: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_acknowledged(self) -> bool:
        return self.acknowledged_at is not None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ApiOrder":
        """Create an order from its API representation."""
        channel = payload.get("_embedded", {}).get("channel") or payload.get("channel") or {}
        return cls(
            id=int(payload["id"]),
            reference=str(payload.get("reference", "")),
            channel_id=channel.get("id"),
            channel_name=channel.get("name", ""),
            status=payload.get("status", ""),
            acknowledged_at=payload.get("acknowledgedAt"),
            payload=payload,
        )


@dataclass
class OperationResult:
    """Result of an executed order operation."""

    tickets: list[ApiTicket] = field(default_factory=list)

    def get_tickets(self) -> list[ApiTicket]:
        return list(self.tickets)


class OrderOperation:
    """
    Builder for a batch of order operations.

    Entries are grouped by operation type since each type is posted to
    its own endpoint.

    Example:
        >>> operation = OrderOperation()
        >>> operation.acknowledge("ref-1", "amazon", "100000012", "success")
        >>> operation.get_entries("acknowledge")
        [{'reference': 'ref-1', 'channelName': 'amazon', 'storeReference': '100000012', 'status': 'success'}]
    """

    def __init__(self):
        self._entries: dict[str, list[dict[str, Any]]] = {}

    def _add(self, operation_type: str, entry: dict[str, Any]) -> "OrderOperation":
        self._entries.setdefault(operation_type, []).append(entry)
        return self

    def acknowledge(self, reference: str, channel_name: str, store_reference: str, status: str) -> "OrderOperation":
        """Acknowledge an order with its import status and local reference."""
        return self._add(
            OperationType.ACKNOWLEDGE,
            {
                "reference": reference,
                "channelName": channel_name,
                "storeReference": store_reference,
                "status": status,
            },
        )

    def unacknowledge(self, reference: str, channel_name: str) -> "OrderOperation":
        """Revert a previous acknowledgement."""
        return self._add(OperationType.UNACKNOWLEDGE, {"reference": reference, "channelName": channel_name})

    def cancel(self, reference: str, channel_name: str, reason: str = "") -> "OrderOperation":
        """Cancel an order."""
        entry = {"reference": reference, "channelName": channel_name}
        if reason:
            entry["reason"] = reason
        return self._add(OperationType.CANCEL, entry)

    def ship(
        self,
        reference: str,
        channel_name: str,
        carrier: str = "",
        tracking_number: str = "",
        tracking_url: str = "",
    ) -> "OrderOperation":
        """Mark an order as shipped with its tracking information."""
        return self._add(
            OperationType.SHIP,
            {
                "reference": reference,
                "channelName": channel_name,
                "carrier": carrier,
                "trackingNumber": tracking_number,
                "trackingLink": tracking_url,
            },
        )

    @property
    def operation_types(self) -> list[str]:
        return list(self._entries)

    def get_entries(self, operation_type: str) -> list[dict[str, Any]]:
        return list(self._entries.get(operation_type, []))

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{op}={len(entries)}" for op, entries in self._entries.items())
        return f"OrderOperation({counts})"
