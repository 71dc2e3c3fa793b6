"""NetOps API module - FastAPI service behind the session gate."""
