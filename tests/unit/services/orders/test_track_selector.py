"""Tests unitarios para la selección del seguimiento de envío."""

import pytest

from marketplace_sync.domain.models import ShipmentTrack
from marketplace_sync.services.orders.track_selector import select_best_track


def _tracks(*relevances):
    return [
        ShipmentTrack(sales_order_id=1, tracking_number=f"T{index}", relevance=relevance)
        for index, relevance in enumerate(relevances)
    ]


class TestSelectBestTrack:
    """Tests para select_best_track."""

    def test_later_track_wins_ties(self):
        """Debe elegir el índice 2 para relevancias [3, 7, 7, 2]."""
        tracks = _tracks(3, 7, 7, 2)

        assert select_best_track(tracks) is tracks[2]

    def test_single_track(self):
        """Debe retornar el único seguimiento disponible."""
        tracks = _tracks(0)

        assert select_best_track(tracks) is tracks[0]

    def test_all_equal_returns_last(self):
        """Debe retornar el último si todos tienen la misma relevancia."""
        tracks = _tracks(1, 1, 1)

        assert select_best_track(tracks) is tracks[-1]

    def test_empty_input_raises(self):
        """Debe lanzar ValueError si no hay seguimientos."""
        with pytest.raises(ValueError):
            select_best_track([])
