import random
import unittest

from sidequest.itinerary import format_itinerary, route_coordinates
from sidequest.models import Anchor, OptimizationRequest, Point, Strategy, Topology
from sidequest.config import OptimiserSettings
from sidequest.optimisation import optimise


class TestSimulation(unittest.TestCase):
    def test_random_cases(self):
        # Perform a handful of random simulations to verify that the
        # pipeline functions end-to-end without raising exceptions.
        settings = OptimiserSettings(sa_iterations=200, restart_trials=5)
        rng = random.Random(2024)
        for _ in range(10):
            n = rng.randint(2, 9)
            points = []
            for i in range(n):
                # generate random coordinates near Toronto (lat 43.6-43.7, lon -79.45 to -79.35)
                lat = 43.6 + rng.random() * 0.1
                lon = -79.45 + rng.random() * 0.1
                points.append(Point(f"Stop {i}", lat, lon))
            anchor = Anchor(43.65, -79.4) if rng.random() < 0.5 else None
            topology = Topology(closed=rng.random() < 0.5, anchored=anchor is not None)
            request = OptimizationRequest(points, anchor, topology)
            for strategy in Strategy:
                result = optimise(request, strategy, settings, rng=random.Random(rng.randrange(10**6)))
                self.assertEqual(sorted(result.tour), list(range(n)))
                self.assertGreaterEqual(result.cost_km, 0.0)
                text = format_itinerary(result, points, anchor, topology)
                self.assertIn(f"{result.cost_km:.2f} km", text)
                coords = route_coordinates(result.tour, points, anchor, topology)
                self.assertGreaterEqual(len(coords), n)


if __name__ == "__main__":
    unittest.main()
