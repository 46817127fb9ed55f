import unittest

import folium

from sidequest.itinerary import format_itinerary, route_coordinates
from sidequest.models import Anchor, OptimizationResult, Point, Strategy, Topology
from sidequest.visualisation import create_route_map

POINTS = [
    Point("Union Station", 43.6453, -79.3806),
    Point("CN Tower", 43.6426, -79.3871),
    Point("St. Lawrence Market", 43.6487, -79.3716),
]
ANCHOR = Anchor(43.65, -79.39)


class TestRouteCoordinates(unittest.TestCase):
    def test_open(self):
        coords = route_coordinates([2, 0, 1], POINTS, None, Topology(closed=False))
        self.assertEqual(coords, [POINTS[2].coords, POINTS[0].coords, POINTS[1].coords])

    def test_closed(self):
        coords = route_coordinates([2, 0, 1], POINTS, None, Topology(closed=True))
        self.assertEqual(coords[-1], POINTS[2].coords)
        self.assertEqual(len(coords), 4)

    def test_anchored_loop(self):
        coords = route_coordinates([1, 0, 2], POINTS, ANCHOR, Topology(closed=True, anchored=True))
        self.assertEqual(coords[0], ANCHOR.coords)
        self.assertEqual(coords[-1], ANCHOR.coords)
        self.assertEqual(len(coords), 5)

    def test_empty(self):
        self.assertEqual(route_coordinates([], POINTS), [])


class TestFormatItinerary(unittest.TestCase):
    def test_unanchored(self):
        result = OptimizationResult([1, 0, 2], 1.23456, Strategy.TWO_OPT)
        text = format_itinerary(result, POINTS, None, Topology(closed=False))
        self.assertIn("Route (NN + 2-opt)", text)
        self.assertIn("Start: POI[1] | Distance: 1.23 km | Stops: 3", text)
        self.assertIn("1. CN Tower (43.6426, -79.3871)", text)
        self.assertNotIn("Return to", text)

    def test_anchored(self):
        result = OptimizationResult([0, 2, 1], 2.5, Strategy.MULTI_START)
        text = format_itinerary(result, POINTS, ANCHOR, Topology(closed=True, anchored=True))
        self.assertIn("Start: My Location", text)
        self.assertIn("Stops: 4", text)
        self.assertIn("1. You (43.6500, -79.3900)", text)
        self.assertIn("2. Union Station", text)
        self.assertTrue(text.endswith("Return to You"))


class TestRouteMap(unittest.TestCase):
    def test_map_with_route(self):
        m = create_route_map(POINTS, [0, 1, 2], ANCHOR, Topology(closed=True, anchored=True), dark=True)
        self.assertIsInstance(m, folium.Map)
        html = m.get_root().render()
        self.assertIn("L.polyline", html)
        self.assertIn("dark_all", html)

    def test_map_without_points(self):
        self.assertIsInstance(create_route_map([]), folium.Map)


if __name__ == "__main__":
    unittest.main()
