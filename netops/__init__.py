"""
NetOps - network operations reporting portal

Typed access to the reporting backend's remote procedures, fetch policies
for large date ranges and slow queries, site neighbor search and a
cookie-session gate in front of the data API.
"""

__version__ = "1.0.0"

from netops.config import Config, get_config

__all__ = ["Config", "get_config", "__version__"]
