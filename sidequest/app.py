"""
Streamlit application for SideQuest walking routes.

This script defines the user interface and orchestrates the underlying
modules: points of interest are loaded from CSV, found by name or
discovered around the user's location, then put in a short walking
order by one of four heuristics and shown on a map with a stepped
itinerary.

To run this app locally for development, install the package and
execute:

    streamlit run sidequest/app.py

Optimiser settings can be overridden in ``.streamlit/secrets.toml``
(e.g. ``SA_ITERATIONS = 5000``) or with ``SIDEQUEST_*`` environment
variables.
"""

from __future__ import annotations

import logging
import os
import sys

import streamlit as st
from streamlit_folium import folium_static

# Ensure the package can be imported when run as a script via
# `streamlit run sidequest/app.py`.
parent_dir = os.path.dirname(os.path.dirname(__file__))
if parent_dir not in sys.path:
    sys.path.append(parent_dir)

from sidequest.config import OptimiserSettings, settings_from_env, settings_from_mapping
from sidequest.errors import DegenerateInput, SideQuestError
from sidequest.geocode import search_place
from sidequest.itinerary import format_itinerary
from sidequest.models import Anchor, OptimizationRequest, Point, Strategy, Topology
from sidequest.nearby import find_nearby
from sidequest.optimisation import optimise
from sidequest.poi_io import parse_poi_csv
from sidequest.visualisation import create_route_map

logger = logging.getLogger(__name__)


def load_settings() -> OptimiserSettings:
    """Environment variables first, then Streamlit secrets on top."""
    settings = settings_from_env()
    try:
        secrets = dict(st.secrets)
    except FileNotFoundError:
        secrets = {}
    return settings_from_mapping(secrets, base=settings)


def init_state() -> None:
    defaults = {
        "points": [],
        "anchor": None,
        "nearby": [],
        "result": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def add_point(point: Point) -> None:
    # Rebuild the list so earlier requests keep their own copy.
    st.session_state["points"] = st.session_state["points"] + [point]
    st.session_state["result"] = None
    st.success(f"Added: {point.name}")


def sidebar_sources(settings: OptimiserSettings) -> None:
    st.sidebar.header("Points of interest")
    uploaded = st.sidebar.file_uploader("Load CSV (name, lat, lon)", type=["csv"])
    if uploaded is not None and st.sidebar.button("Replace list with CSV"):
        try:
            points = parse_poi_csv(uploaded.getvalue().decode("utf-8"))
        except SideQuestError as exc:
            st.sidebar.error(str(exc))
        else:
            st.session_state["points"] = points
            st.session_state["result"] = None
            st.sidebar.success(f"Loaded {len(points)} POIs. Pick an algorithm.")

    query = st.sidebar.text_input("Search a place or address")
    if st.sidebar.button("Search and add"):
        if not query.strip():
            st.sidebar.warning("Type a place or address first.")
        else:
            point = search_place(query.strip())
            if point is None:
                st.sidebar.warning("No results found. Try a more specific query.")
            else:
                add_point(point)

    st.sidebar.header("My location")
    col_lat, col_lon = st.sidebar.columns(2)
    lat = col_lat.number_input("Latitude", value=43.6532, format="%.5f")
    lon = col_lon.number_input("Longitude", value=-79.3832, format="%.5f")
    if st.sidebar.button("Use this location"):
        st.session_state["anchor"] = Anchor(lat=float(lat), lon=float(lon))
        st.session_state["result"] = None
    if st.session_state["anchor"] is not None and st.sidebar.button("Forget location"):
        st.session_state["anchor"] = None
        st.session_state["result"] = None

    place_type = st.sidebar.radio("Nearby", ["cafe", "bar", "club"], horizontal=True)
    if st.sidebar.button("Search nearby"):
        anchor = st.session_state["anchor"]
        if anchor is None:
            st.sidebar.warning("Set your location first.")
        else:
            found = find_nearby(anchor, place_type, settings.nearby_radius_m, settings.nearby_limit)
            if found is None:
                st.sidebar.error("Nearby search failed. Try again later.")
            elif not found:
                st.sidebar.info("Nothing found in this radius.")
            st.session_state["nearby"] = found or []


def nearby_picker() -> None:
    nearby = st.session_state["nearby"]
    if not nearby:
        return
    st.subheader(f"Nearby places ({len(nearby)})")
    labels = [f"{p.name} ({p.lat:.4f}, {p.lon:.4f})" for p in nearby]
    chosen = st.multiselect("Add to route", labels)
    if chosen and st.button("Add selected"):
        for label in chosen:
            add_point(nearby[labels.index(label)])


def main():
    st.set_page_config(page_title="SideQuest", layout="wide")
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    init_state()
    st.title("SideQuest walking routes")

    sidebar_sources(settings)
    nearby_picker()

    points = st.session_state["points"]
    anchor = st.session_state["anchor"]

    col_start, col_loop, col_dark = st.columns(3)
    from_location = col_start.toggle("Start from my location", value=False)
    closed = col_loop.toggle("Return to start", value=True)
    dark = col_dark.toggle("Night mode", value=False)
    topology = Topology(closed=closed, anchored=from_location)

    st.caption(f"{len(points)} POIs loaded")
    buttons = st.columns(len(Strategy))
    chosen = None
    for col, strategy in zip(buttons, Strategy):
        if col.button(strategy.label, disabled=len(points) < 2):
            chosen = strategy
    if st.button("Clear route"):
        st.session_state["result"] = None

    if chosen is not None:
        try:
            request = OptimizationRequest(points=points, anchor=anchor, topology=topology)
            with st.spinner("Computing route…"):
                st.session_state["result"] = (optimise(request, chosen, settings), topology)
        except DegenerateInput:
            st.error("Set your location first, or start from POI[0].")
        except SideQuestError as exc:
            logger.warning("Optimisation failed: %s", exc)
            st.error(str(exc))

    result = st.session_state["result"]
    tour = None
    if result is not None:
        result, shown_topology = result
        tour = result.tour
        st.text(format_itinerary(result, points, anchor, shown_topology))
        topology = shown_topology
    fol_map = create_route_map(
        points, tour, anchor, topology, dark=dark, nearby=st.session_state["nearby"]
    )
    folium_static(fol_map, width=900, height=550)


if __name__ == "__main__":
    main()
