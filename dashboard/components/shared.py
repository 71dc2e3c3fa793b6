"""Session-state helpers shared by every dashboard page."""

from __future__ import annotations

import logging
from typing import Any, Callable

import streamlit as st

from dashboard.api_client import PortalAPIError

logger = logging.getLogger(__name__)

ALL_LABEL = "All"


def load_into_state(key: str, loader: Callable[[], Any], default: Any = None) -> Any:
    """Run ``loader`` and keep its result under ``key``.

    On an API error the message is shown inline and the previous value for
    ``key`` is returned unchanged. ``SessionExpired`` propagates.
    """
    try:
        data = loader()
    except PortalAPIError as e:
        logger.error("Dashboard fetch %s failed: %s", key, e)
        st.error(str(e))
        return st.session_state.get(key, default)
    st.session_state[key] = data
    return data


def pick(label: str, options: list[str], key: str) -> str | None:
    """Selectbox with a leading "All"; returns ``None`` for "All"."""
    choice = st.selectbox(label, [ALL_LABEL, *options], key=key)
    return None if choice == ALL_LABEL else choice


def format_number(value: Any, digits: int = 2) -> str:
    if value is None:
        return "-"
    try:
        return f"{float(value):,.{digits}f}"
    except (TypeError, ValueError):
        return str(value)
