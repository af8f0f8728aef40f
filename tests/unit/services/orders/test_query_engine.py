"""Tests unitarios para OrderQueryEngine."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from marketplace_sync.domain.models import ApiOrder
from marketplace_sync.services.orders.query_engine import OrderQueryEngine
from marketplace_sync.services.orders.query_spec import OrderQuerySpec

IMPORT_FROM = datetime(2025, 1, 1, tzinfo=UTC)
SYNCING_FROM = datetime(2025, 1, 8, tzinfo=UTC)


def _config(refusal="none", cancellation="none", refund="none"):
    config = MagicMock()
    config.get_import_from_date.return_value = IMPORT_FROM
    config.get_syncing_from_date.return_value = SYNCING_FROM
    config.get_refusal_syncing_action.return_value = refusal
    config.get_cancellation_syncing_action.return_value = cancellation
    config.get_refund_syncing_action.return_value = refund
    return config


@pytest.fixture
def order_repository():
    repository = MagicMock()
    repository.query = AsyncMock(return_value=[])
    return repository


def _engine(api_session_manager, order_repository, **actions):
    return OrderQueryEngine(api_session_manager, _config(**actions), order_repository)


class TestRemoteImportable:
    """Tests para la búsqueda de pedidos remotos importables."""

    @pytest.mark.asyncio
    async def test_lists_unacknowledged_since_import_date(self, store, api_session_manager, order_api, order_repository):
        """Debe filtrar por no reconocidos desde la fecha de importación."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_remote_importable(store)

        order_api.get_all.assert_awaited_once_with({"acknowledgment": "unacknowledged", "since": IMPORT_FROM})
        api_session_manager.get_store_api_resource.assert_called_once_with(store)


class TestRemoteImportableByReference:
    """Tests para la búsqueda por canal y referencia."""

    @pytest.mark.asyncio
    async def test_missing_channel_returns_none_without_call(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar None sin llamar a la API si falta el canal."""
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_remote_importable_by_reference(store, None, "R1") is None
        order_api.get_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_reference_returns_none_without_call(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar None sin llamar a la API si la referencia está vacía."""
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_remote_importable_by_reference(store, 7, "") is None
        order_api.get_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_filters_use_int_channel_and_trimmed_reference(
        self, store, api_session_manager, order_api, order_repository
    ):
        """Debe enviar el canal como entero y la referencia sin espacios."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_remote_importable_by_reference(store, "7", " R1 ")

        order_api.get_all.assert_awaited_once_with(
            {"acknowledgment": "unacknowledged", "channelId": 7, "reference": "R1"}
        )

    @pytest.mark.asyncio
    async def test_single_match_is_returned(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar el pedido si exactamente uno coincide."""
        order_api.get_all.return_value = [ApiOrder(id=1, reference="R1"), ApiOrder(id=2, reference="R10")]
        engine = _engine(api_session_manager, order_repository)

        result = await engine.find_remote_importable_by_reference(store, 7, "R1")

        assert result == ApiOrder(id=1, reference="R1")

    @pytest.mark.asyncio
    async def test_ambiguous_match_returns_none(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar None si dos pedidos tienen la misma referencia."""
        order_api.get_all.return_value = [ApiOrder(id=1, reference="R1"), ApiOrder(id=2, reference="R1")]
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_remote_importable_by_reference(store, 7, "R1") is None

    @pytest.mark.asyncio
    async def test_no_exact_match_returns_none(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar None si la API solo devuelve referencias parecidas."""
        order_api.get_all.return_value = [ApiOrder(id=2, reference="R10")]
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_remote_importable_by_reference(store, 7, "R1") is None


class TestRemoteSyncable:
    """Tests para la búsqueda de pedidos remotos sincronizables."""

    @pytest.mark.asyncio
    async def test_all_none_makes_no_remote_call(self, store, api_session_manager, order_api, order_repository):
        """Debe retornar lista vacía sin llamar a la API si todo es 'none'."""
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_remote_syncable(store) == []
        order_api.get_all.assert_not_awaited()
        api_session_manager.get_store_api_resource.assert_not_called()

    @pytest.mark.asyncio
    async def test_refused_only_listing_call(self, store, api_session_manager, order_api, order_repository):
        """Debe pedir solo 'refused', reconocidos, desde la fecha de sincronización."""
        remote_orders = [ApiOrder(id=3, reference="R3", status="refused")]
        order_api.get_all.return_value = remote_orders
        engine = _engine(api_session_manager, order_repository, refusal="cancel")

        result = await engine.find_remote_syncable(store)

        assert result == remote_orders
        order_api.get_all.assert_awaited_once_with(
            {"status": ["refused"], "acknowledgment": "acknowledged", "since": SYNCING_FROM}
        )


class TestLocalOrders:
    """Tests para las consultas de pedidos locales."""

    @pytest.mark.asyncio
    async def test_local_importable_spec(self, store, api_session_manager, order_repository):
        """Debe consultar pedidos no importados e importables desde la fecha de importación."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_local_importable(store)

        order_repository.query.assert_awaited_once_with(
            OrderQuerySpec(store_id=1, is_imported=False, is_importable=True, created_from=IMPORT_FROM)
        )

    @pytest.mark.asyncio
    async def test_local_importable_with_limit(self, store, api_session_manager, order_repository):
        """Debe pedir la primera página del tamaño indicado."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_local_importable(store, limit=20)

        spec = order_repository.query.await_args.args[0]
        assert (spec.page, spec.page_size) == (1, 20)

    @pytest.mark.asyncio
    async def test_local_syncable_all_none_makes_no_query(self, store, api_session_manager, order_repository):
        """Debe retornar lista vacía sin consultar si no hay estados sincronizables."""
        engine = _engine(api_session_manager, order_repository)

        assert await engine.find_local_syncable(store) == []
        order_repository.query.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_local_syncable_spec(self, store, api_session_manager, order_repository):
        """Debe filtrar importados por estados sincronizables desde la fecha de sincronización."""
        engine = _engine(api_session_manager, order_repository, cancellation="cancel", refund="refund")

        await engine.find_local_syncable(store)

        order_repository.query.assert_awaited_once_with(
            OrderQuerySpec(
                store_id=1,
                is_imported=True,
                shopping_feed_statuses=("cancelled", "refunded"),
                created_from=SYNCING_FROM,
            )
        )

    @pytest.mark.asyncio
    async def test_notifiable_shipments_exclude_fulfilled(self, store, api_session_manager, order_repository):
        """Debe excluir los pedidos gestionados por el marketplace."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_notifiable_shipments(store)

        order_repository.query.assert_awaited_once_with(
            OrderQuerySpec(store_id=1, is_fulfilled=False, notifiable_shipment=True)
        )

    @pytest.mark.asyncio
    async def test_notifiable_imports_and_cancellations(self, store, api_session_manager, order_repository):
        """Debe usar los filtros de notificación de importación y cancelación."""
        engine = _engine(api_session_manager, order_repository)

        await engine.find_notifiable_imports(store)
        await engine.find_notifiable_cancellations(store)

        specs = [call.args[0] for call in order_repository.query.await_args_list]
        assert specs == [
            OrderQuerySpec(store_id=1, notifiable_import=True),
            OrderQuerySpec(store_id=1, notifiable_cancellation=True),
        ]
