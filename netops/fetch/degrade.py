"""Degrading-limit retry for capped row fetches."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Sequence

from netops.remote.client import RemoteError

logger = logging.getLogger(__name__)

DEFAULT_LIMITS: tuple[int, ...] = (1500, 200, 100)


async def fetch_with_degrading_limit(
    attempt: Callable[[int], Awaitable[list[dict[str, Any]]]],
    limits: Sequence[int] = DEFAULT_LIMITS,
    *,
    label: str = "fetch",
) -> list[dict[str, Any]]:
    """Try ``attempt(limit)`` for each cap until one succeeds.

    Only timeout-class errors move on to the next, smaller cap. Any other
    error returns ``[]`` immediately, as does running out of caps.
    """
    for limit in limits:
        try:
            return await attempt(limit)
        except RemoteError as exc:
            logger.error("%s error (limit=%d): %s", label, limit, exc.as_log_fields())
            if not exc.is_timeout:
                return []
    logger.warning("%s timed out at every limit %s", label, list(limits))
    return []
