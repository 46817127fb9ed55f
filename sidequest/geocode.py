"""
Place search for SideQuest.

This module provides a thin wrapper around the `geopy` library to turn
a free-form query ("CN Tower", "100 Queen St W") into a point of
interest. It uses OpenStreetMap's Nominatim service via geopy's API. A
small cache is maintained in memory to avoid repeated queries.

Example usage:

    from sidequest.geocode import search_place
    point = search_place("CN Tower")

``search_place`` returns ``None`` if nothing is found or the service
cannot be reached.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim

from sidequest.models import Point

logger = logging.getLogger(__name__)

_geocoder: Optional[Nominatim] = None


def _get_geocoder() -> Nominatim:
    """Return a singleton Nominatim geocoder instance."""
    global _geocoder
    if _geocoder is None:
        # Nominatim's usage policy requires an identifying user agent.
        _geocoder = Nominatim(user_agent="sidequest_app")
    return _geocoder


def short_name(address: str) -> str:
    """First two comma separated parts of a Nominatim display name."""
    parts = [part.strip() for part in address.split(",")]
    return ", ".join(parts[:2])


@lru_cache(maxsize=128)
def _lookup(query: str) -> Optional[Point]:
    """Cached Nominatim lookup. Service errors propagate and are not cached."""
    geocoder = _get_geocoder()
    try:
        location = geocoder.geocode(query, exactly_one=True, timeout=10)
    except GeocoderTimedOut:
        logger.info("Geocoder timed out for %r, retrying", query)
        location = geocoder.geocode(query, exactly_one=True, timeout=20)
    if not location:
        return None
    return Point(name=short_name(location.address), lat=float(location.latitude), lon=float(location.longitude))


def search_place(query: str) -> Optional[Point]:
    """Look up a place and return it as a ``Point``, or ``None``.

    If a timeout occurs, the request is retried once with a longer
    timeout. Found places and empty results are cached; failed requests
    are not, so the next search tries the service again.

    Args:
        query: Free form text to search for.

    Returns:
        The best match as a point named after its address.
    """
    try:
        return _lookup(query)
    except GeocoderServiceError as exc:
        logger.warning("Geocoding %r failed: %s", query, exc)
        return None
