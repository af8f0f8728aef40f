"""
Per-store order synchronization settings.

Each store may override the defaults from Settings in its `configuration`
mapping, e.g.:

    {
        "order_import_from_date": "2025-01-01T00:00:00+00:00",
        "order_refusal_syncing_action": "cancel",
    }
"""

import logging
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ValidationError, field_validator

from marketplace_sync.core.config import VALID_SYNCING_ACTIONS, Settings, get_settings
from marketplace_sync.domain.models import Store
from marketplace_sync.utils.error_handler import ValidationException

logger = logging.getLogger(__name__)

SYNCING_ACTION_NONE = "none"


class StoreOrderConfig(BaseModel):
    """Validated order settings of one store."""

    order_import_from_date: datetime | None = None
    order_syncing_from_date: datetime | None = None
    order_import_from_days: int | None = None
    order_syncing_from_days: int | None = None
    order_refusal_syncing_action: str | None = None
    order_cancellation_syncing_action: str | None = None
    order_refund_syncing_action: str | None = None

    model_config = {"extra": "ignore"}

    @field_validator(
        "order_refusal_syncing_action",
        "order_cancellation_syncing_action",
        "order_refund_syncing_action",
    )
    @classmethod
    def validate_syncing_action(cls, v):
        if v is None:
            return v
        if v.lower() not in VALID_SYNCING_ACTIONS:
            raise ValueError(f"Syncing action must be one of: {VALID_SYNCING_ACTIONS}")
        return v.lower()

    @field_validator("order_import_from_date", "order_syncing_from_date")
    @classmethod
    def ensure_utc(cls, v):
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class OrderConfig:
    """
    Order settings resolver, store configuration first, Settings second.

    Dates are returned as aware UTC datetimes. When a store sets no explicit
    date, the window is computed relative to `now` from the configured
    number of days.
    """

    def __init__(self, settings: Settings | None = None, clock=None):
        self.settings = settings or get_settings()
        self._clock = clock or (lambda: datetime.now(UTC))

    def get_store_config(self, store: Store) -> StoreOrderConfig:
        """Parse and validate the order settings of a store."""
        try:
            return StoreOrderConfig.model_validate(store.configuration or {})
        except ValidationError as e:
            logger.error(f"Invalid order configuration for store {store.id}: {e}")
            raise ValidationException(
                message=f"Invalid order configuration for store {store.id}",
                field="configuration",
                invalid_value=store.configuration,
            ) from e

    def get_import_from_date(self, store: Store) -> datetime:
        config = self.get_store_config(store)
        if config.order_import_from_date is not None:
            return config.order_import_from_date
        days = config.order_import_from_days
        if days is None:
            days = self.settings.ORDER_IMPORT_FROM_DAYS
        return self._clock() - timedelta(days=days)

    def get_syncing_from_date(self, store: Store) -> datetime:
        config = self.get_store_config(store)
        if config.order_syncing_from_date is not None:
            return config.order_syncing_from_date
        days = config.order_syncing_from_days
        if days is None:
            days = self.settings.ORDER_SYNCING_FROM_DAYS
        return self._clock() - timedelta(days=days)

    def get_refusal_syncing_action(self, store: Store) -> str:
        config = self.get_store_config(store)
        return config.order_refusal_syncing_action or self.settings.ORDER_REFUSAL_SYNCING_ACTION

    def get_cancellation_syncing_action(self, store: Store) -> str:
        config = self.get_store_config(store)
        return config.order_cancellation_syncing_action or self.settings.ORDER_CANCELLATION_SYNCING_ACTION

    def get_refund_syncing_action(self, store: Store) -> str:
        config = self.get_store_config(store)
        return config.order_refund_syncing_action or self.settings.ORDER_REFUND_SYNCING_ACTION
