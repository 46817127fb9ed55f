"""
Loading points of interest from CSV.

The header must name a ``name`` column, a latitude column (``lat`` or
``latitude``) and a longitude column (``lon``, ``lng`` or ``longitude``).
Column names are matched case-insensitively. Rows without a name or
with unusable coordinates are skipped.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from typing import List, Optional, Sequence

from sidequest.errors import InvalidInput
from sidequest.models import Point

logger = logging.getLogger(__name__)

LAT_COLUMNS = ("lat", "latitude")
LON_COLUMNS = ("lon", "lng", "longitude")


def _find_column(header: Sequence[str], candidates: Sequence[str]) -> Optional[int]:
    for name in candidates:
        if name in header:
            return header.index(name)
    return None


def _parse_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return math.nan


def parse_poi_csv(text: str) -> List[Point]:
    """Parse CSV text into a list of points.

    Args:
        text: CSV content with a header row.

    Returns:
        The points in file order. An input with no data rows gives an
        empty list.

    Raises:
        InvalidInput: If the header lacks a name, latitude or longitude column.
    """
    rows = list(csv.reader(io.StringIO(text.strip())))
    if len(rows) < 2:
        return []
    header = [h.strip().lower() for h in rows[0]]
    i_name = _find_column(header, ("name",))
    i_lat = _find_column(header, LAT_COLUMNS)
    i_lon = _find_column(header, LON_COLUMNS)
    if i_name is None or i_lat is None or i_lon is None:
        raise InvalidInput(
            f"CSV header must include name, lat/latitude, lon/longitude (got: {','.join(rows[0])})"
        )

    needed = max(i_name, i_lat, i_lon) + 1
    points: List[Point] = []
    for line_no, row in enumerate(rows[1:], start=2):
        if len(row) < needed:
            logger.info("Skipping short CSV row %d", line_no)
            continue
        name = row[i_name].strip()
        lat = _parse_float(row[i_lat])
        lon = _parse_float(row[i_lon])
        if not name or not math.isfinite(lat) or not math.isfinite(lon):
            logger.info("Skipping CSV row %d with missing name or bad coordinates", line_no)
            continue
        points.append(Point(name=name, lat=lat, lon=lon))
    return points


def load_poi_csv(path: str) -> List[Point]:
    """Read and parse a CSV file of points."""
    with open(path, encoding="utf-8") as fh:
        return parse_poi_csv(fh.read())
