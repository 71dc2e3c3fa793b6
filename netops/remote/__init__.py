"""NetOps remote module - backend client and normalized remote errors."""

from netops.remote.client import (
    CLIENT_TIMEOUT_CODE,
    NETWORK_ERROR_CODE,
    QUERY_TIMEOUT_CODE,
    ConfigurationError,
    RemoteClient,
    RemoteError,
    best_effort,
    create_remote_client,
    retry,
)

__all__ = [
    "CLIENT_TIMEOUT_CODE",
    "NETWORK_ERROR_CODE",
    "QUERY_TIMEOUT_CODE",
    "ConfigurationError",
    "RemoteClient",
    "RemoteError",
    "best_effort",
    "create_remote_client",
    "retry",
]
