import os
import tempfile
import unittest

from sidequest.errors import InvalidInput
from sidequest.models import Point
from sidequest.poi_io import load_poi_csv, parse_poi_csv


class TestPoiCsv(unittest.TestCase):
    def test_basic(self):
        text = "name,lat,lon\nCN Tower,43.6426,-79.3871\nUnion Station,43.6453,-79.3806\n"
        self.assertEqual(
            parse_poi_csv(text),
            [Point("CN Tower", 43.6426, -79.3871), Point("Union Station", 43.6453, -79.3806)],
        )

    def test_header_aliases_and_case(self):
        text = "Latitude, LNG ,Name\r\n43.6,-79.4,Cafe A\r\n"
        self.assertEqual(parse_poi_csv(text), [Point("Cafe A", 43.6, -79.4)])

    def test_longitude_alias(self):
        text = "name,latitude,longitude\nA,1,2\n"
        self.assertEqual(parse_poi_csv(text), [Point("A", 1.0, 2.0)])

    def test_quoted_names(self):
        text = 'name,lat,lon\n"Bar, Grill",43.6,-79.4\n'
        self.assertEqual(parse_poi_csv(text)[0].name, "Bar, Grill")

    def test_bad_rows_skipped(self):
        text = "name,lat,lon\n,1,2\nB,abc,2\nC,1\nD,nan,2\nE,3,4\n"
        self.assertEqual(parse_poi_csv(text), [Point("E", 3.0, 4.0)])

    def test_header_only(self):
        self.assertEqual(parse_poi_csv("name,lat,lon\n"), [])
        self.assertEqual(parse_poi_csv(""), [])

    def test_missing_column(self):
        with self.assertRaises(InvalidInput):
            parse_poi_csv("title,lat,lon\nA,1,2\n")

    def test_load_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "POI_small.csv")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write("name,lat,lng\nCafé Olé,43.65,-79.38\n")
            self.assertEqual(load_poi_csv(path), [Point("Café Olé", 43.65, -79.38)])


if __name__ == "__main__":
    unittest.main()
