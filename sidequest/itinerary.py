"""
Itinerary helpers for SideQuest.

Turns an optimisation result into what the front end shows: the list of
coordinates the route line passes through and a numbered, human
readable itinerary.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sidequest.models import Anchor, OptimizationResult, Point, Topology


def _uses_anchor(anchor: Optional[Anchor], topology: Topology) -> bool:
    return topology.anchored and anchor is not None


def route_coordinates(
    tour: Sequence[int],
    points: Sequence[Point],
    anchor: Optional[Anchor] = None,
    topology: Topology = Topology(),
) -> List[Tuple[float, float]]:
    """Vertices of the route polyline, in walking order."""
    if not tour:
        return []
    coords = [points[idx].coords for idx in tour]
    if _uses_anchor(anchor, topology):
        coords.insert(0, anchor.coords)
        if topology.closed:
            coords.append(anchor.coords)
    elif topology.closed:
        coords.append(coords[0])
    return coords


def format_itinerary(
    result: OptimizationResult,
    points: Sequence[Point],
    anchor: Optional[Anchor] = None,
    topology: Topology = Topology(),
) -> str:
    """Format itinerary text for display or sharing."""
    with_anchor = _uses_anchor(anchor, topology)
    if with_anchor:
        start_label = "My Location"
    elif result.tour:
        start_label = f"POI[{result.tour[0]}]"
    else:
        start_label = "-"
    stops = len(result.tour) + (1 if with_anchor else 0)

    lines = [
        result.strategy.label,
        f"Start: {start_label} | Distance: {result.cost_km:.2f} km | Stops: {stops}",
        "",
    ]
    num = 1
    if with_anchor:
        lines.append(f"{num}. You ({anchor.lat:.4f}, {anchor.lon:.4f})")
        num += 1
    for idx in result.tour:
        p = points[idx]
        lines.append(f"{num}. {p.name} ({p.lat:.4f}, {p.lon:.4f})")
        num += 1
    if topology.closed and result.tour:
        back_to = "You" if with_anchor else points[result.tour[0]].name
        lines.append(f"Return to {back_to}")
    return "\n".join(lines)
