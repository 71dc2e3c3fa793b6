"""NetOps portal dashboard.

Login form, filter sidebar and four views (site map, traffic, availability,
complaints) over the NetOps API.

Usage:
    streamlit run dashboard/streamlit_app.py
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Load .env from project root so NETOPS_* vars are available
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Ensure project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from dashboard.api_client import PortalAPIError, SessionExpired, get_client  # noqa: E402
from dashboard.components.charts import (  # noqa: E402
    render_availability_bundle,
    render_complaint_ranking,
    render_traffic_daily,
)
from dashboard.components.gis_map import render_neighbor_table, render_site_map  # noqa: E402
from dashboard.components.shared import load_into_state, pick  # noqa: E402

# ---------------------------------------------------------------------------
# Page Configuration
# ---------------------------------------------------------------------------
st.set_page_config(page_title="NetOps Portal", layout="wide", initial_sidebar_state="expanded")

if "client" not in st.session_state:
    st.session_state.client = get_client()
if "user" not in st.session_state:
    st.session_state.user = None

client = st.session_state.client


def _expire_session() -> None:
    st.session_state.user = None
    client.session.cookies.clear()
    st.rerun()


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
def render_login() -> None:
    st.title("NetOps Portal")
    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            client.login(username, password)
        except PortalAPIError as e:
            st.error(e.message)
            return
        st.session_state.user = client.me()
        st.rerun()


if st.session_state.user is None:
    try:
        st.session_state.user = client.me(raise_errors=True)
    except PortalAPIError as e:
        st.error(e.message)
if st.session_state.user is None:
    render_login()
    st.stop()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
def sidebar_filters() -> dict:
    with st.sidebar:
        st.markdown(f"**{st.session_state.user.get('username', '')}**")
        if st.button("Sign out"):
            client.logout()
            st.session_state.user = None
            st.rerun()

        view = st.radio("View", ["Site map", "Traffic", "Availability", "Complaints"])

        subregions = load_into_state("subregions", client.subregions, [])
        subregion = pick("Sub-region", subregions, "f_subregion")
        grids = load_into_state("grids", lambda: client.grids(subregion), [])
        grid = pick("Grid", grids, "f_grid")
        districts = load_into_state("districts", lambda: client.districts(subregion, grid), [])
        district = pick("District", districts, "f_district")

        today = date.today()
        default_range = (today - timedelta(days=7), today)
        picked = st.date_input("Date range", default_range)
        date_from, date_to = picked if len(picked) == 2 else default_range
    return {
        "view": view,
        "subregion": subregion,
        "grid": grid,
        "district": district,
        "date_from": date_from.isoformat(),
        "date_to": date_to.isoformat(),
    }


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def view_site_map(f: dict) -> None:
    st.subheader("Site map")
    c1, c2 = st.columns(2)
    site_query = c1.text_input("Search site / grid / district")
    address_query = c2.text_input("Search address")
    area = {"subregion": f["subregion"], "grid": f["grid"], "district": f["district"]}
    result = load_into_state(
        "map_points", lambda: client.map_points(area, site_query, address_query), {"points": [], "center": None}
    )
    points = result.get("points") or []
    site_ids = [p["site_id"] for p in points if p.get("site_id")]
    selected_id = st.selectbox("Selected site", ["-", *site_ids])
    selected_id = None if selected_id == "-" else selected_id

    neighbors = []
    if selected_id:
        selected = next(p for p in points if p.get("site_id") == selected_id)
        found = load_into_state("neighbors", lambda: client.neighbors(selected, points), {"neighbors": []})
        neighbors = found.get("neighbors") or []

    center = result.get("center") or (33.6844, 73.0479)
    if selected_id:
        chosen = next(p for p in points if p.get("site_id") == selected_id)
        if chosen.get("latitude") is not None:
            center = (chosen["latitude"], chosen["longitude"])
    render_site_map(points, tuple(center), selected_id, {n["site_id"] for n in neighbors})
    if selected_id:
        st.markdown("**Nearest sites (5 km)**")
        render_neighbor_table(neighbors)


def view_traffic(f: dict) -> None:
    st.subheader("Traffic")
    rows = load_into_state(
        "traffic_daily", lambda: client.traffic_daily(f["date_from"], f["date_to"], f["subregion"]), []
    )
    render_traffic_daily(rows)
    level = st.radio("Latest day by", ["grid", "district"], horizontal=True)
    latest = load_into_state("traffic_latest", lambda: client.traffic_latest(level, f["subregion"]), [])
    st.dataframe(latest, use_container_width=True, hide_index=True)


def view_availability(f: dict) -> None:
    st.subheader("Availability")
    filters = {k: f[k] for k in ("subregion", "grid", "district", "date_from", "date_to")}
    bundle = load_into_state("availability_bundle", lambda: client.availability_bundle(filters), {})
    render_availability_bundle(bundle or {})


def view_complaints(f: dict) -> None:
    st.subheader("Complaints")
    filters = {k: f[k] for k in ("subregion", "grid", "district")}
    rows = load_into_state("complaint_sites", lambda: client.complaint_sites(filters), [])
    render_complaint_ranking(rows)


VIEWS = {
    "Site map": view_site_map,
    "Traffic": view_traffic,
    "Availability": view_availability,
    "Complaints": view_complaints,
}

try:
    filters = sidebar_filters()
    VIEWS[filters["view"]](filters)
except SessionExpired:
    _expire_session()
