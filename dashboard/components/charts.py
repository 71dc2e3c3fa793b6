"""Plotly charts for traffic, availability and complaints."""

from __future__ import annotations

from typing import Any

import plotly.graph_objects as go
import streamlit as st

TRAFFIC_SERIES = {
    "total_gb": "Total data (GB)",
    "data_4g_gb": "4G data (GB)",
    "data_3g_gb": "3G data (GB)",
    "voice_erl": "Voice (Erl)",
}


def _layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        height=360,
        margin=dict(l=10, r=10, t=40, b=10),
        legend=dict(orientation="h", y=-0.2),
    )
    return fig


def render_traffic_daily(rows: list[dict[str, Any]]) -> None:
    if not rows:
        st.info("No traffic data for the selected range.")
        return
    dates = [r.get("date") for r in rows]
    fig = go.Figure()
    for field, label in TRAFFIC_SERIES.items():
        fig.add_trace(go.Scatter(x=dates, y=[r.get(field, 0) for r in rows], mode="lines", name=label))
    st.plotly_chart(_layout(fig, "Daily traffic"), use_container_width=True)


def render_availability_bundle(bundle: dict[str, Any]) -> None:
    cards = bundle.get("cards") or {}
    c1, c2, c3 = st.columns(3)
    c1.metric("Sites", f"{int(cards.get('site_count') or 0):,}")
    c2.metric("Avg PGS", "-" if cards.get("avg_pgs") is None else f"{cards['avg_pgs']:.2f}%")
    c3.metric("Avg SB", "-" if cards.get("avg_sb") is None else f"{cards['avg_sb']:.2f}%")

    daily = bundle.get("daily") or []
    if daily:
        fig = go.Figure(go.Scatter(
            x=[d.get("date") for d in daily],
            y=[d.get("overall") for d in daily],
            mode="lines+markers",
            name="Overall",
        ))
        st.plotly_chart(_layout(fig, "Daily availability (%)"), use_container_width=True)

    by_grid = bundle.get("by_grid") or []
    if by_grid:
        fig = go.Figure(go.Bar(
            x=[g.get("name") for g in by_grid],
            y=[g.get("overall") for g in by_grid],
            name="Overall",
        ))
        st.plotly_chart(_layout(fig, "Availability by grid (%)"), use_container_width=True)


def render_complaint_ranking(rows: list[dict[str, Any]], top: int = 20) -> None:
    if not rows:
        st.info("No complaints in the selected area.")
        return
    ranked = sorted(rows, key=lambda r: r.get("complaints_count") or 0, reverse=True)[:top]
    fig = go.Figure(go.Bar(
        x=[r.get("complaints_count") for r in ranked],
        y=[r.get("SiteName") for r in ranked],
        orientation="h",
    ))
    fig.update_yaxes(autorange="reversed")
    st.plotly_chart(_layout(fig, f"Top {len(ranked)} sites by complaints"), use_container_width=True)
