"""Site map: pydeck scatter of sites with the selected site and its neighbors highlighted."""

from __future__ import annotations

from typing import Any

import pydeck as pdk
import streamlit as st

SITE_COLOR = [91, 155, 213, 180]
SELECTED_COLOR = [239, 83, 80, 255]
NEIGHBOR_COLOR = [255, 167, 38, 230]


def render_site_map(
    points: list[dict[str, Any]],
    center: tuple[float, float],
    selected_id: str | None = None,
    neighbor_ids: set[str] | None = None,
) -> None:
    neighbor_ids = neighbor_ids or set()
    data = []
    for p in points:
        if p.get("latitude") is None or p.get("longitude") is None:
            continue
        site_id = p.get("site_id")
        if site_id == selected_id:
            color, radius = SELECTED_COLOR, 220
        elif site_id in neighbor_ids:
            color, radius = NEIGHBOR_COLOR, 160
        else:
            color, radius = SITE_COLOR, 90
        data.append({
            "site_id": site_id,
            "lat": p["latitude"],
            "lon": p["longitude"],
            "district": p.get("district") or "",
            "grid": p.get("grid") or "",
            "color": color,
            "radius": radius,
        })

    if not data:
        st.warning("No sites with coordinates for the current filters.")
        return

    layer = pdk.Layer(
        "ScatterplotLayer",
        data=data,
        get_position=["lon", "lat"],
        get_fill_color="color",
        get_radius="radius",
        radius_min_pixels=3,
        pickable=True,
    )
    view_state = pdk.ViewState(latitude=center[0], longitude=center[1], zoom=10 if selected_id else 8)
    deck = pdk.Deck(
        layers=[layer],
        initial_view_state=view_state,
        tooltip={"html": "<b>{site_id}</b><br/>{district} / {grid}"},
    )
    st.pydeck_chart(deck, use_container_width=True)


def render_neighbor_table(neighbors: list[dict[str, Any]]) -> None:
    if not neighbors:
        st.caption("No neighbors within 5 km.")
        return
    st.dataframe(
        [
            {
                "Site": n["site_id"],
                "Distance": n["distance_label"],
                "District": n.get("district") or "",
                "Grid": n.get("grid") or "",
            }
            for n in neighbors
        ],
        use_container_width=True,
        hide_index=True,
    )
