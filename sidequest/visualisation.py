"""
Map visualisation utilities for SideQuest.

This module provides a helper function to build an interactive map
using the Folium library. It renders the points of interest, numbered
in visiting order once a route is known, the user's location and the
route itself as a polyline. The map can be embedded directly in a
Streamlit app via ``streamlit_folium``.
"""

from __future__ import annotations

from typing import Optional, Sequence

import folium

from sidequest.itinerary import route_coordinates
from sidequest.models import Anchor, Point, Topology

DEFAULT_CENTRE = (43.6532, -79.3832)

CARTO_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OSM</a> '
    '&copy; <a href="https://carto.com/attributions">CARTO</a>'
)
LIGHT_TILES = "https://{s}.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}{r}.png"
DARK_TILES = "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png"

MARKER_HTML = (
    "<div style='font-size: 12px; color: white; background-color: #007bff; "
    "border-radius: 50%; width: 24px; height: 24px; text-align: center; "
    "line-height: 24px;'>{order}</div>"
)


def create_route_map(
    points: Sequence[Point],
    tour: Optional[Sequence[int]] = None,
    anchor: Optional[Anchor] = None,
    topology: Topology = Topology(),
    dark: bool = False,
    nearby: Sequence[Point] = (),
) -> folium.Map:
    """Create a Folium map of the points and, if given, the route through them.

    Args:
        points: Points of interest.
        tour: Visiting order as list of indices. Without it the points
            are drawn as plain circles.
        anchor: The user's location, drawn when set.
        topology: Used to close the route line.
        dark: Use the dark basemap.
        nearby: Discovered places not yet added to the route.

    Returns:
        A Folium Map object ready for display.
    """
    m = folium.Map(
        location=list(DEFAULT_CENTRE),
        zoom_start=13,
        tiles=DARK_TILES if dark else LIGHT_TILES,
        attr=CARTO_ATTRIBUTION,
        max_zoom=20,
    )
    if tour:
        for order, idx in enumerate(tour, start=1):
            p = points[idx]
            folium.Marker(
                location=[p.lat, p.lon],
                popup=folium.Popup(f"{order}. {p.name}", parse_html=True),
                icon=folium.DivIcon(html=MARKER_HTML.format(order=order)),
            ).add_to(m)
        poly_coords = [list(c) for c in route_coordinates(tour, points, anchor, topology)]
        folium.PolyLine(poly_coords, color="blue", weight=7, opacity=0.95).add_to(m)
    else:
        for p in points:
            folium.CircleMarker(
                location=[p.lat, p.lon], radius=7, weight=2, fill=True, fill_opacity=0.9, popup=p.name
            ).add_to(m)
    for p in nearby:
        folium.CircleMarker(
            location=[p.lat, p.lon], radius=7, weight=2, color="green", fill=True, popup=p.name
        ).add_to(m)
    if anchor is not None:
        folium.CircleMarker(
            location=[anchor.lat, anchor.lon], radius=9, weight=3, color="red", fill=True, popup="You"
        ).add_to(m)

    bounds = [p.coords for p in points] + [p.coords for p in nearby]
    if anchor is not None:
        bounds.append(anchor.coords)
    if bounds:
        lats = [lat for lat, _ in bounds]
        lons = [lon for _, lon in bounds]
        m.fit_bounds([[min(lats), min(lons)], [max(lats), max(lons)]], padding=(20, 20))
    return m
