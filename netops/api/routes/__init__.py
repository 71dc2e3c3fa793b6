"""API routers, one per portal area."""
