"""
Route optimisation heuristics for SideQuest.

This module implements travelling salesman heuristics for ordering a
handful of points of interest so that the walk between them is short.
It provides:

    - ``nearest_neighbor`` / ``nearest_neighbor_from_anchor``: build an
      initial route by repeatedly visiting the nearest unvisited point,
      starting from a given index or from the point nearest the anchor.
    - ``two_opt``: remove crossing edges until no single reversal helps.
    - ``simulated_annealing``: random segment reversals, accepting worse
      routes with a probability that decreases as the temperature cools.
    - ``multi_start``: independent random restarts polished with 2-opt,
      keeping the best. The front end calls this "GA-lite" but there is
      no population, crossover or mutation.
    - ``optimise``: run one of the above for an ``OptimizationRequest``.

Routes are lists of indices into a distance matrix. Index 0 is the
default start. None of the heuristics guarantee an optimal route.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, List, Optional, Sequence

from sidequest.config import DEFAULT_SETTINGS, OptimiserSettings
from sidequest.errors import DegenerateInput, InvalidInput
from sidequest.models import OptimizationRequest, OptimizationResult, Strategy
from sidequest.routing import DistanceTable

logger = logging.getLogger(__name__)

StopCheck = Optional[Callable[[], bool]]


def _extend_greedy(route: List[int], unvisited: List[int], dist_matrix: Sequence[Sequence[float]]) -> List[int]:
    # unvisited is kept sorted so ties go to the lowest index
    current = route[-1]
    while unvisited:
        best_pos = 0
        best_d = math.inf
        row = dist_matrix[current]
        for pos, j in enumerate(unvisited):
            if row[j] < best_d:
                best_d = row[j]
                best_pos = pos
        current = unvisited.pop(best_pos)
        route.append(current)
    return route


def nearest_neighbor(dist_matrix: Sequence[Sequence[float]], start: int = 0) -> List[int]:
    """Construct an initial route using the nearest neighbor heuristic.

    Args:
        dist_matrix: A square matrix of distances.
        start: Index of the start location in the matrix.

    Returns:
        A list of indices representing the visiting order, starting
        with ``start`` and including all other indices exactly once.

    Raises:
        InvalidInput: If the matrix is empty or ``start`` is out of range.
    """
    n = len(dist_matrix)
    if n == 0:
        raise InvalidInput("At least one point is needed to build a route")
    if not 0 <= start < n:
        raise InvalidInput(f"Start index {start} out of range for {n} points")
    unvisited = [j for j in range(n) if j != start]
    return _extend_greedy([start], unvisited, dist_matrix)


def nearest_neighbor_from_anchor(
    dist_matrix: Sequence[Sequence[float]], anchor_dists: Sequence[float]
) -> List[int]:
    """Nearest neighbor route whose first stop is the point nearest the anchor."""
    n = len(dist_matrix)
    if n == 0:
        raise InvalidInput("At least one point is needed to build a route")
    first = 0
    best = math.inf
    for i in range(n):
        if anchor_dists[i] < best:
            best = anchor_dists[i]
            first = i
    unvisited = [j for j in range(n) if j != first]
    return _extend_greedy([first], unvisited, dist_matrix)


def construct_tour(request: OptimizationRequest, table: Optional[DistanceTable] = None) -> List[int]:
    """Greedy starting route for a request, honouring its topology."""
    if table is None:
        table = DistanceTable(request.points, request.anchor)
    if request.topology.anchored:
        if table.anchor_dists is None:
            raise DegenerateInput("Anchored topology requested but no anchor is set")
        return nearest_neighbor_from_anchor(table.matrix, table.anchor_dists)
    return nearest_neighbor(table.matrix, start=request.start_index)


def two_opt(route: List[int], dist_matrix: Sequence[Sequence[float]], epsilon: float = 1e-12) -> List[int]:
    """Perform 2-opt optimisation on a given route, in place.

    Each pass compares every pair of interior edges and reverses the
    segment between them when that shortens the route by more than
    ``epsilon``. The first and last positions never move. Passes repeat
    until one makes no change, so running this again on its own output
    changes nothing.

    Args:
        route: Initial route as a list of indices. It is modified.
        dist_matrix: Square matrix of distances corresponding to the
            indices in ``route``.
        epsilon: Minimum gain for a reversal to count as an improvement.

    Returns:
        ``route``, now 2-optimal.
    """
    n = len(route)
    improved = True
    passes = 0
    while improved:
        improved = False
        passes += 1
        for i in range(1, n - 2):
            for k in range(i + 1, n - 1):
                a, b = route[i - 1], route[i]
                c, d = route[k], route[k + 1]
                before = dist_matrix[a][b] + dist_matrix[c][d]
                after = dist_matrix[a][c] + dist_matrix[b][d]
                if after + epsilon < before:
                    route[i:k + 1] = route[i:k + 1][::-1]
                    improved = True
    logger.debug("2-opt converged after %d passes", passes)
    return route


def simulated_annealing(
    seed_route: Sequence[int],
    cost_fn: Callable[[Sequence[int]], float],
    rng: random.Random,
    iterations: int = 2500,
    initial_temperature: float = 0.5,
    cooling: float = 0.999,
    min_temperature: float = 1e-9,
    should_stop: StopCheck = None,
) -> List[int]:
    """Improve a route by simulated annealing.

    Every iteration reverses a random interior segment of the current
    route. Shorter candidates are always accepted; longer ones with
    probability ``exp(-delta / T)``. The temperature is multiplied by
    ``cooling`` once per iteration whatever happens. The best route seen
    is returned, so the result is never longer than ``seed_route``.

    Args:
        seed_route: Starting route, usually the output of ``two_opt``.
        cost_fn: Cost of a full route, in kilometers.
        rng: Source of randomness (``random.Random`` or compatible).
        iterations: Number of candidate moves to try.
        initial_temperature: Starting temperature, in kilometers.
        cooling: Geometric cooling factor.
        min_temperature: Floor applied when computing the acceptance
            probability.
        should_stop: Optional callable checked before each iteration.

    Returns:
        A new list holding the best route found.
    """
    best = list(seed_route)
    best_cost = cost_fn(best)
    n = len(best)
    if n < 4:
        # no interior segment of length two or more
        return best

    current = list(best)
    current_cost = best_cost
    temperature = initial_temperature
    for _ in range(iterations):
        if should_stop is not None and should_stop():
            logger.info("Simulated annealing stopped early")
            break
        i = rng.randint(1, n - 3)
        k = rng.randint(i + 1, n - 2)
        candidate = current.copy()
        candidate[i:k + 1] = candidate[i:k + 1][::-1]
        candidate_cost = cost_fn(candidate)
        delta = candidate_cost - current_cost
        if delta < 0 or rng.random() < math.exp(-delta / max(temperature, min_temperature)):
            current = candidate
            current_cost = candidate_cost
            if current_cost < best_cost:
                best = current.copy()
                best_cost = current_cost
        temperature *= cooling
    logger.debug("Simulated annealing finished: best %.4f km", best_cost)
    return best


def multi_start(
    request: OptimizationRequest,
    rng: random.Random,
    trials: int = 40,
    table: Optional[DistanceTable] = None,
    epsilon: float = 1e-12,
    should_stop: StopCheck = None,
) -> List[int]:
    """Multi-start 2-opt search.

    The nearest neighbor route polished by 2-opt is the baseline. Each
    trial shuffles all indices, polishes the shuffle with 2-opt and
    replaces the best route if it is strictly shorter. Trials do not
    share anything with each other.

    Args:
        request: Points, anchor and topology.
        rng: Source of randomness used for the shuffles.
        trials: Number of random restarts.
        table: Precomputed distances for ``request``.
        epsilon: Passed to ``two_opt``.
        should_stop: Optional callable checked before each trial.

    Returns:
        The best route found across the baseline and all trials.
    """
    if table is None:
        table = DistanceTable(request.points, request.anchor)
    topology = request.topology
    best = two_opt(construct_tour(request, table), table.matrix, epsilon)
    best_cost = table.route_cost(best, topology)
    n = len(table)
    for trial in range(trials):
        if should_stop is not None and should_stop():
            logger.info("Multi-start search stopped after %d trials", trial)
            break
        candidate = list(range(n))
        rng.shuffle(candidate)
        polished = two_opt(candidate, table.matrix, epsilon)
        cost = table.route_cost(polished, topology)
        if cost < best_cost:
            logger.debug("Trial %d improved the route: %.4f -> %.4f km", trial, best_cost, cost)
            best = polished
            best_cost = cost
    return best


def optimise(
    request: OptimizationRequest,
    strategy: Strategy,
    settings: OptimiserSettings = DEFAULT_SETTINGS,
    rng: Optional[random.Random] = None,
    should_stop: StopCheck = None,
) -> OptimizationResult:
    """Compute a visiting order for ``request`` using ``strategy``.

    The strategies build on each other: nearest neighbor, then 2-opt on
    top of it, then simulated annealing on top of that. The multi-start
    search runs its own 2-opt restarts. Zero or one point gives the
    trivial route.

    Args:
        request: Points, anchor and topology.
        strategy: Which heuristic to run.
        settings: Tuning constants.
        rng: Random source for the stochastic strategies. A fresh
            ``random.Random(settings.seed)`` is used when omitted.
        should_stop: Optional cancellation check for the long-running
            strategies.

    Returns:
        The route and its cost in kilometers.

    Raises:
        DegenerateInput: If the topology is anchored, there is no anchor
            and there is at least one point.
    """
    if not request.points:
        return OptimizationResult([], 0.0, strategy)
    if request.topology.anchored and request.anchor is None:
        raise DegenerateInput("Anchored topology requested but no anchor is set")
    table = DistanceTable(request.points, request.anchor)
    n = len(table)
    if n == 1:
        tour = list(range(n))
        return OptimizationResult(tour, table.route_cost(tour, request.topology), strategy)

    if rng is None:
        rng = random.Random(settings.seed)
    logger.debug("Optimising %d points with %s", n, strategy.value)

    if strategy is Strategy.MULTI_START:
        tour = multi_start(
            request,
            rng,
            trials=settings.restart_trials,
            table=table,
            epsilon=settings.two_opt_epsilon,
            should_stop=should_stop,
        )
    else:
        tour = construct_tour(request, table)
        if strategy in (Strategy.TWO_OPT, Strategy.ANNEALING):
            tour = two_opt(tour, table.matrix, settings.two_opt_epsilon)
        if strategy is Strategy.ANNEALING:
            tour = simulated_annealing(
                tour,
                lambda route: table.route_cost(route, request.topology),
                rng,
                iterations=settings.sa_iterations,
                initial_temperature=settings.sa_initial_temperature,
                cooling=settings.sa_cooling,
                min_temperature=settings.sa_min_temperature,
                should_stop=should_stop,
            )
    cost = table.route_cost(tour, request.topology)
    logger.info("%s: %d stops, %.2f km", strategy.label, n, cost)
    return OptimizationResult(tour, cost, strategy)
