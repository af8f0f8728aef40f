"""
Order log domain model (append-only order history entry).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class LogType(str, Enum):
    """Severity of an order history entry."""

    DEBUG = "debug"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class OrderLog:
    """Diagnostic entry appended to a marketplace order history."""

    order_id: int
    type: LogType
    message: str
    details: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert log entry to dictionary for persistence."""
        return {
            "order_id": self.order_id,
            "type": self.type.value,
            "message": self.message,
            "details": self.details,
            "created_at": self.created_at,
        }
