"""
Distance model for SideQuest.

Walking distances are estimated with the great-circle (Haversine)
formula on a spherical Earth. This module provides the point-to-point
distance, a pairwise distance matrix and the cost of a tour under a
given topology.

Example usage:

    coords = [(43.6532, -79.3832), (43.6426, -79.3871)]
    dist_matrix = compute_haversine_matrix(coords)

Tour cost is always the sum of the legs a walker would take: consecutive
points, plus the leg from the anchor and the leg back to the start when
the topology asks for them.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple, Union

from sidequest.errors import DegenerateInput, NumericalAnomaly
from sidequest.models import Anchor, Point, Topology

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_distance(coord1: Tuple[float, float], coord2: Tuple[float, float]) -> float:
    """Compute the great-circle distance between two coordinates in kilometers."""
    lat1, lon1 = coord1
    lat2, lon2 = coord2
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    if a > 1.0:
        # rounding near antipodal points; NaN is left for route_cost to report
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance(p1: Union[Point, Anchor], p2: Union[Point, Anchor]) -> float:
    """Distance in kilometers between two objects with ``lat`` and ``lon``."""
    return haversine_distance((p1.lat, p1.lon), (p2.lat, p2.lon))


def compute_haversine_matrix(coords: Sequence[Tuple[float, float]]) -> List[List[float]]:
    """Compute the pairwise distance matrix using the Haversine formula.

    Args:
        coords: List of (lat, lon) tuples.

    Returns:
        Square matrix of distances in kilometers with a zero diagonal.
    """
    n = len(coords)
    dist_matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            dist_matrix[i][j] = haversine_distance(coords[i], coords[j])
    return dist_matrix


def _sum_legs(
    tour: Sequence[int],
    leg: Callable[[int, int], float],
    anchor_leg: Optional[Callable[[int], float]],
    topology: Topology,
) -> float:
    if not tour:
        return 0.0
    if topology.anchored and anchor_leg is None:
        raise DegenerateInput("Anchored topology requested but no anchor is set")
    total = 0.0
    for i in range(len(tour) - 1):
        total += leg(tour[i], tour[i + 1])
    if topology.anchored:
        total += anchor_leg(tour[0])
        if topology.closed:
            total += anchor_leg(tour[-1])
    elif topology.closed:
        total += leg(tour[-1], tour[0])
    if not math.isfinite(total):
        raise NumericalAnomaly(f"Route cost is not finite: {total!r}")
    return total


def route_cost(
    tour: Sequence[int],
    points: Sequence[Point],
    anchor: Optional[Anchor] = None,
    topology: Topology = Topology(),
) -> float:
    """Compute the length of a tour in kilometers.

    Args:
        tour: Visiting order as indices into ``points``.
        points: The points of interest.
        anchor: Live location, required for anchored topologies.
        topology: Whether the tour is closed and whether it is anchored.

    Returns:
        The summed length of every leg the topology includes.

    Raises:
        DegenerateInput: If the topology is anchored but ``anchor`` is ``None``.
        NumericalAnomaly: If the total is not finite.
    """
    anchor_leg = None
    if anchor is not None:
        anchor_leg = lambda i: distance(anchor, points[i])  # noqa: E731
    return _sum_legs(tour, lambda i, j: distance(points[i], points[j]), anchor_leg, topology)


class DistanceTable:
    """Precomputed distances for one set of points and an optional anchor.

    The strategies evaluate many candidate tours over the same points, so
    the matrix is built once per request. ``route_cost`` sums the same
    legs in the same order as the module level function and therefore
    returns identical values.
    """

    def __init__(self, points: Sequence[Point], anchor: Optional[Anchor] = None):
        self.points = tuple(points)
        self.anchor = anchor
        self.matrix = compute_haversine_matrix([p.coords for p in self.points])
        self.anchor_dists: Optional[List[float]] = None
        if anchor is not None:
            self.anchor_dists = [distance(anchor, p) for p in self.points]
        logger.debug("Built distance table for %d points (anchor=%s)", len(self.points), anchor is not None)

    def __len__(self) -> int:
        return len(self.points)

    def route_cost(self, tour: Sequence[int], topology: Topology) -> float:
        anchor_leg = self.anchor_dists.__getitem__ if self.anchor_dists is not None else None
        return _sum_legs(tour, lambda i, j: self.matrix[i][j], anchor_leg, topology)
