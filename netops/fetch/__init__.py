"""NetOps fetch policies - date-range chunking and degrading-limit retry."""

from netops.fetch.chunking import (
    DEFAULT_CHUNK_DAYS,
    DateChunk,
    FetchError,
    date_chunks,
    fetch_chunked,
    parse_iso_date,
)
from netops.fetch.degrade import DEFAULT_LIMITS, fetch_with_degrading_limit

__all__ = [
    "DEFAULT_CHUNK_DAYS",
    "DEFAULT_LIMITS",
    "DateChunk",
    "FetchError",
    "date_chunks",
    "fetch_chunked",
    "fetch_with_degrading_limit",
    "parse_iso_date",
]
