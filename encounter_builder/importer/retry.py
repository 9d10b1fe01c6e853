"""Retry with linear backoff for async operations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .fetch import ImportFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    base_delay_ms: int = 200,
    retry_on: tuple[type[Exception], ...] = (ImportFetchError,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await operation() up to `attempts` times.

    After failed attempt n the wrapper waits n * base_delay_ms before trying
    again. The last error is re-raised once attempts run out; errors outside
    `retry_on` propagate immediately.
    """
    attempts = max(1, attempts)
    attempt = 1
    while True:
        try:
            return await operation()
        except retry_on as e:
            if attempt >= attempts:
                raise
            delay = attempt * base_delay_ms / 1000
            logger.warning(
                "attempt %d/%d failed: %s (retrying in %.2fs)", attempt, attempts, e, delay
            )
            await sleep(delay)
            attempt += 1
