"""NetOps Streamlit dashboard."""
