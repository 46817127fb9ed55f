"""
Nearby place discovery via the Overpass API.

Finds cafés, bars or clubs around a location using OpenStreetMap data.
Nodes, ways and relations are all queried; ways and relations are
placed at the centre Overpass reports for them.

The public Overpass instance is rate limited. Point ``OVERPASS_URL`` at
your own instance for heavy use.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import requests

from sidequest.errors import InvalidInput
from sidequest.models import Anchor, Point

logger = logging.getLogger(__name__)

OVERPASS_URL = "https://overpass-api.de/api/interpreter"

AMENITY_FILTERS = {
    "cafe": '["amenity"="cafe"]',
    "bar": '["amenity"~"bar|pub"]',
    "club": '["amenity"="nightclub"]',
}

PLACE_LABELS = {
    "cafe": "Cafe",
    "bar": "Bar",
    "club": "Club",
}


def build_query(anchor: Anchor, place_type: str, radius_m: int) -> str:
    """Build the Overpass QL query for places of ``place_type`` around ``anchor``."""
    if place_type not in AMENITY_FILTERS:
        raise InvalidInput(f"Unknown place type {place_type!r}")
    f = AMENITY_FILTERS[place_type]
    around = f"(around:{radius_m},{anchor.lat},{anchor.lon})"
    return (
        "[out:json][timeout:25];\n"
        "(\n"
        f"  node{f}{around};\n"
        f"  way{f}{around};\n"
        f"  relation{f}{around};\n"
        ");\n"
        "out center tags;\n"
    )


def parse_elements(data: dict, place_type: str, limit: int) -> List[Point]:
    """Turn an Overpass JSON response into points, keeping at most ``limit``."""
    points: List[Point] = []
    for el in data.get("elements", []):
        center = el.get("center") or {}
        lat = el.get("lat", center.get("lat"))
        lon = el.get("lon", center.get("lon"))
        if lat is None or lon is None:
            continue
        lat, lon = float(lat), float(lon)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            continue
        name = (el.get("tags") or {}).get("name") or PLACE_LABELS[place_type]
        points.append(Point(name=name, lat=lat, lon=lon))
        if len(points) >= limit:
            break
    return points


def find_nearby(
    anchor: Anchor, place_type: str = "cafe", radius_m: int = 1200, limit: int = 60
) -> Optional[List[Point]]:
    """Find places of a given type around a location.

    Args:
        anchor: Centre of the search.
        place_type: One of ``cafe``, ``bar`` or ``club``.
        radius_m: Search radius in metres.
        limit: Maximum number of places returned.

    Returns:
        The places found (possibly empty), or ``None`` if the Overpass
        request failed.
    """
    query = build_query(anchor, place_type, radius_m)
    try:
        resp = requests.post(
            OVERPASS_URL,
            data={"data": query},
            headers={"Content-Type": "application/x-www-form-urlencoded;charset=UTF-8"},
            timeout=30,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Overpass request failed: %s", exc)
        return None
    points = parse_elements(data, place_type, limit)
    logger.info("Found %d nearby %s places within %d m", len(points), place_type, radius_m)
    return points
