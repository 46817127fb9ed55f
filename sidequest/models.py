"""
Value types shared by the SideQuest modules.

A request bundles everything an optimisation strategy needs (the points,
the optional anchor and the topology) so that no strategy depends on
state held elsewhere. Results carry the visiting order as a list of
indices into ``request.points`` together with its length in kilometres.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from sidequest.errors import InvalidInput


@dataclass(frozen=True)
class Point:
    name: str
    lat: float
    lon: float

    @property
    def coords(self) -> Tuple[float, float]:
        return self.lat, self.lon


@dataclass(frozen=True)
class Anchor:
    """A live location used as the start (and end) of an anchored tour."""

    lat: float
    lon: float

    @property
    def coords(self) -> Tuple[float, float]:
        return self.lat, self.lon


@dataclass(frozen=True)
class Topology:
    """Which edges take part in the cost of a tour.

    Attributes:
        closed: Whether the tour returns to where it started.
        anchored: Whether the tour starts from the anchor instead of
            the first point of the tour.
    """

    closed: bool = True
    anchored: bool = False


class Strategy(enum.Enum):
    NEAREST_NEIGHBOR = "nn"
    TWO_OPT = "2opt"
    ANNEALING = "sa"
    MULTI_START = "ga-lite"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    Strategy.NEAREST_NEIGHBOR: "Route (NN)",
    Strategy.TWO_OPT: "Route (NN + 2-opt)",
    Strategy.ANNEALING: "Route (SA)",
    Strategy.MULTI_START: "Route (GA-lite)",
}


@dataclass(frozen=True)
class OptimizationRequest:
    """Input of every optimisation strategy.

    Args:
        points: The points of interest, in a fixed order. Indices into
            this sequence are what tours are made of.
        anchor: Optional live location, required when
            ``topology.anchored`` is set.
        topology: Open or closed, anchored or not.
        start_index: First point of an unanchored tour.
    """

    points: Sequence[Point]
    anchor: Optional[Anchor] = None
    topology: Topology = field(default_factory=Topology)
    start_index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))
        for idx, p in enumerate(self.points):
            if not (math.isfinite(p.lat) and math.isfinite(p.lon)):
                raise InvalidInput(f"Point {idx} ({p.name!r}) has non-finite coordinates")
        if self.anchor is not None and not (
            math.isfinite(self.anchor.lat) and math.isfinite(self.anchor.lon)
        ):
            raise InvalidInput("Anchor has non-finite coordinates")
        if self.points and not 0 <= self.start_index < len(self.points):
            raise InvalidInput(
                f"start_index {self.start_index} out of range for {len(self.points)} points"
            )


@dataclass
class OptimizationResult:
    tour: List[int]
    cost_km: float
    strategy: Strategy
