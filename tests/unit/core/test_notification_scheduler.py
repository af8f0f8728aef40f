"""Tests unitarios para NotificationScheduler."""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from marketplace_sync.core.scheduler import NotificationScheduler
from marketplace_sync.domain.models import Store
from marketplace_sync.utils.error_handler import MarketplaceAPIException, SyncException

STORES = [Store(id=1, shopping_feed_store_id=1001), Store(id=2, shopping_feed_store_id=1002)]


def _lock_factory(busy_store_ids=()):
    @asynccontextmanager
    async def lock(store_id):
        yield store_id not in busy_store_ids

    return lock


def _scheduler(notifier, busy_store_ids=()):
    return NotificationScheduler(
        notifier,
        AsyncMock(return_value=STORES),
        interval_minutes=1,
        lock_factory=_lock_factory(busy_store_ids),
    )


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.notify_all_updates = AsyncMock(side_effect=lambda store: {"store_id": store.id})
    return notifier


class TestRunOnce:
    """Tests para una pasada del scheduler."""

    @pytest.mark.asyncio
    async def test_every_store_is_processed_in_order(self, notifier):
        """Debe procesar las tiendas una tras otra."""
        summaries = await _scheduler(notifier).run_once()

        assert summaries == [{"store_id": 1}, {"store_id": 2}]
        assert [call.args[0].id for call in notifier.notify_all_updates.await_args_list] == [1, 2]

    @pytest.mark.asyncio
    async def test_store_failure_does_not_stop_others(self, notifier):
        """Debe loggear el error de una tienda y continuar con la siguiente."""
        notifier.notify_all_updates.side_effect = [MarketplaceAPIException("HTTP 500"), {"store_id": 2}]

        with patch("marketplace_sync.core.scheduler.log_error") as log_error:
            summaries = await _scheduler(notifier).run_once()

        assert summaries == [{"store_id": 2}]
        log_error.assert_called_once()
        logged, context = log_error.call_args.args
        assert isinstance(logged, SyncException)
        assert isinstance(logged.__cause__, MarketplaceAPIException)
        assert logged.details == {"store_id": 1, "operation": "notify_all_updates"}
        assert context["store_id"] == 1

    @pytest.mark.asyncio
    async def test_locked_store_is_skipped(self, notifier):
        """Debe omitir la tienda cuyo lock está tomado."""
        summaries = await _scheduler(notifier, busy_store_ids={1}).run_once()

        assert summaries == [{"store_id": 2}]
        notifier.notify_all_updates.assert_awaited_once()


class TestRunForever:
    """Tests para la ejecución periódica."""

    @pytest.mark.asyncio
    async def test_stop_ends_the_loop(self, notifier):
        """Debe terminar tras la pasada en curso cuando se llama a stop()."""
        scheduler = _scheduler(notifier)

        async def stop_after_first_run(store):
            scheduler.stop()
            return {"store_id": store.id}

        notifier.notify_all_updates.side_effect = stop_after_first_run

        await asyncio.wait_for(scheduler.run_forever(), timeout=5)

        assert not scheduler.is_running
        assert scheduler.last_run_at is not None
        assert notifier.notify_all_updates.await_count == 2
