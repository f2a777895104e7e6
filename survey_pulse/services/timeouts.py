"""Caller Timeouts — bound repository-backed work; no retries.

Invariants:
    - On timeout the inner task is cancelled and its partial result discarded
    - Timeout surfaces as QueryTimeoutError, never as an empty/partial payload
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from survey_pulse.core.errors import QueryTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_timeout(
    awaitable: Awaitable[T], timeout_seconds: float, operation: str,
) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(
            f"{operation} timed out after {timeout_seconds}s",
            extra={"operation": operation},
        )
        raise QueryTimeoutError(operation, timeout_seconds)
