"""Fixtures compartidos para los tests unitarios."""

import dataclasses
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from marketplace_sync.domain.models import MarketplaceOrder, OperationResult, Store


@pytest.fixture
def store():
    """Tienda sincronizada con el marketplace."""
    return Store(id=1, shopping_feed_store_id=1001, name="Main")


@pytest.fixture
def make_order():
    """Factory de pedidos importados del marketplace."""

    def _make_order(**overrides) -> MarketplaceOrder:
        values = {
            "id": 10,
            "store_id": 1,
            "marketplace_order_number": "AMZ-0001",
            "marketplace_name": "Amazon",
            "channel_id": 7,
            "sales_order_id": 500,
            "sales_increment_id": "100000500",
            "created_at": datetime(2025, 1, 15, tzinfo=UTC),
        }
        values.update(overrides)
        return MarketplaceOrder(**values)

    return _make_order


@pytest.fixture
def order_api():
    """API de pedidos de la tienda, sin tickets por defecto."""
    api = MagicMock()
    api.get_all = AsyncMock(return_value=[])
    api.execute = AsyncMock(return_value=OperationResult(tickets=[]))
    return api


@pytest.fixture
def api_session_manager(order_api):
    """Session manager que devuelve siempre la misma API de pedidos."""
    manager = MagicMock()
    manager.get_store_api_resource.return_value.get_order_api.return_value = order_api
    return manager


@pytest.fixture
def ticket_repository():
    """Repositorio de tickets que asigna IDs incrementales."""
    repository = MagicMock()
    counter = {"next_id": 1}

    async def save(ticket):
        saved = dataclasses.replace(ticket, id=counter["next_id"])
        counter["next_id"] += 1
        return saved

    repository.save = AsyncMock(side_effect=save)
    return repository


@pytest.fixture
def log_repository():
    """Repositorio de historial de pedidos en memoria."""
    repository = MagicMock()
    repository.save = AsyncMock(side_effect=lambda entry: entry)
    return repository
