"""
Shipment track selection.
"""

from collections.abc import Iterable

from marketplace_sync.domain.models import ShipmentTrack


def select_best_track(tracks: Iterable[ShipmentTrack]) -> ShipmentTrack:
    """
    Pick the most relevant shipment track.

    Ties are won by the later track, so that the most recently added one
    among equally relevant tracks is reported.

    Args:
        tracks: Tracks of a single sales order

    Returns:
        ShipmentTrack: The track with the highest relevance

    Raises:
        ValueError: If there are no tracks
    """
    chosen_track = None

    for track in tracks:
        if chosen_track is None or track.relevance >= chosen_track.relevance:
            chosen_track = track

    if chosen_track is None:
        raise ValueError("Cannot select a shipment track from an empty list")

    return chosen_track
