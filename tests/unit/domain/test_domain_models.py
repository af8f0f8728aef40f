"""Tests unitarios para los modelos de dominio."""

from datetime import UTC, datetime

import pytest

from marketplace_sync.domain.models import ApiOrder, ApiTicket, MarketplaceOrder, OrderOperation, Ticket, TicketAction
from marketplace_sync.utils.error_handler import MarketplaceAPIException


class TestOrderOperation:
    """Tests para el constructor de operaciones de pedidos."""

    def test_entries_are_grouped_by_operation_type(self):
        """Debe agrupar las entradas por tipo de operación."""
        operation = OrderOperation()
        operation.cancel("R1", "amazon", reason="out of stock")
        operation.ship("R2", "cdiscount", "UPS", "1Z", "https://track")
        operation.cancel("R3", "amazon")

        assert operation.operation_types == ["cancel", "ship"]
        assert len(operation) == 3
        assert operation.get_entries("cancel") == [
            {"reference": "R1", "channelName": "amazon", "reason": "out of stock"},
            {"reference": "R3", "channelName": "amazon"},
        ]

    def test_unknown_type_has_no_entries(self):
        """Debe devolver una lista vacía para tipos sin entradas."""
        assert OrderOperation().get_entries("ship") == []


class TestApiResources:
    """Tests para los recursos de la API."""

    def test_api_order_from_payload(self):
        """Debe leer el canal embebido y la fecha de reconocimiento."""
        order = ApiOrder.from_payload(
            {
                "id": "15",
                "reference": "R15",
                "status": "waiting_shipment",
                "acknowledgedAt": "2025-01-02T10:00:00+00:00",
                "_embedded": {"channel": {"id": 7, "name": "amazon"}},
            }
        )

        assert (order.id, order.reference, order.channel_id, order.channel_name) == (15, "R15", 7, "amazon")
        assert order.is_acknowledged

    def test_api_ticket_from_payload(self):
        """Debe leer el ID y el lote del ticket."""
        assert ApiTicket.from_payload({"id": 8, "batchId": "B1"}) == ApiTicket(id="8", batch_id="B1")

    @pytest.mark.parametrize("payload", [{}, {"id": None}, {"id": ""}, {"id": "   "}])
    def test_api_ticket_without_id_is_rejected(self, payload):
        """Debe rechazar un ticket sin ID."""
        with pytest.raises(MarketplaceAPIException):
            ApiTicket.from_payload(payload)


class TestTicket:
    """Tests para el modelo Ticket."""

    def test_empty_id_is_rejected(self):
        """Debe rechazar un ticket sin ID."""
        with pytest.raises(ValueError):
            Ticket(shopping_feed_ticket_id="", order_id=1, action=TicketAction.SHIP)


class TestMarketplaceOrder:
    """Tests para el modelo MarketplaceOrder."""

    def test_from_row(self):
        """Debe construir el pedido desde una fila de la base de datos."""
        order = MarketplaceOrder.from_row(
            {
                "order_id": 4,
                "store_id": 1,
                "marketplace_order_number": "R4",
                "marketplace_name": "amazon",
                "shopping_feed_marketplace_id": 7,
                "shopping_feed_status": "shipped",
                "sales_order_id": None,
                "import_remaining_try_count": 2,
                "is_fulfilled": 0,
                "created_at": datetime(2025, 1, 1, tzinfo=UTC),
            }
        )

        assert order.id == 4
        assert order.channel_id == 7
        assert not order.is_imported
        assert order.is_importable
        assert order.is_fulfilled is False
