"""NetOps RPC module - typed wrappers around every remote procedure."""

from netops.rpc.common import ALL, FilterState, to_nullable

__all__ = ["ALL", "FilterState", "to_nullable"]
