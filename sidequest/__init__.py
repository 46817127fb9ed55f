"""
SideQuest package initialization.

This package provides the core functionality for the SideQuest walking
route planner: given a short list of points of interest, find a visiting
order with a small total walking distance, optionally starting from the
user's location and optionally returning to the start.

Modules:
    models        – Points, anchor, topology, requests and results.
    routing       – Haversine distances and route cost.
    optimisation  – Nearest neighbour, 2‑opt, simulated annealing and
                    multi-start heuristics.
    config        – Tuning constants and how to override them.
    poi_io        – Loading points of interest from CSV.
    geocode       – Place search using Nominatim.
    nearby        – Nearby café/bar/club discovery via Overpass.
    itinerary     – Itinerary text and route coordinates.
    visualisation – Folium based map creation utilities.

The heuristics return good routes quickly but do not guarantee the
shortest one.
"""

__all__ = [
    "models",
    "routing",
    "optimisation",
    "config",
    "poi_io",
    "geocode",
    "nearby",
    "itinerary",
    "visualisation",
]
