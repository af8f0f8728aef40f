"""
Sync policy: which marketplace statuses are actively synchronized for a store.
"""

from marketplace_sync.domain.models import ShoppingFeedStatus, Store
from marketplace_sync.services.orders.interfaces import IOrderConfig
from marketplace_sync.services.orders.order_config import SYNCING_ACTION_NONE


def resolve_syncable_statuses(order_config: IOrderConfig, store: Store) -> list[str]:
    """
    Get the marketplace statuses the store is configured to synchronize.

    A status is syncable when its configured action is anything but "none".

    Args:
        order_config: Per-store order settings
        store: Store to resolve the policy for

    Returns:
        list[str]: Syncable statuses, in the order refused, cancelled, refunded.
            An empty list means there is nothing to sync.
    """
    status_actions = {
        ShoppingFeedStatus.REFUSED: order_config.get_refusal_syncing_action(store),
        ShoppingFeedStatus.CANCELLED: order_config.get_cancellation_syncing_action(store),
        ShoppingFeedStatus.REFUNDED: order_config.get_refund_syncing_action(store),
    }

    return [status for status, action in status_actions.items() if action != SYNCING_ACTION_NONE]
