"""GitHub API rate limit monitoring and retry with backoff."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ATTEMPTS = 5
MAX_WAIT = 3600


def reset_delay(response: httpx.Response, now: float | None = None) -> float | None:
    """Seconds until the quota resets, or None if this is not a rate-limit response.

    A 403 only counts when the quota is actually spent; GitHub sends the reset
    header on every response, including permission failures.
    """
    if response.status_code == 403:
        if response.headers.get("X-RateLimit-Remaining") != "0":
            return None
    elif response.status_code != 429:
        return None
    reset_at = response.headers.get("X-RateLimit-Reset")
    if reset_at is None:
        return None
    now = time.time() if now is None else now
    return min(max(0.0, float(reset_at) - now), MAX_WAIT)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    attempts: int = MAX_ATTEMPTS,
    buffer: float = 30.0,
) -> T:
    """Await ``operation()`` until it succeeds or ``attempts`` run out.

    A rate-limited failure sleeps through the reset window plus ``buffer``
    seconds; any other failure is retried straight away. The last error is
    re-raised once every attempt has failed.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except httpx.HTTPError as exc:
            logger.warning("Attempt %d/%d failed: %s", attempt, attempts, exc)
            if attempt == attempts:
                raise
            if isinstance(exc, httpx.HTTPStatusError):
                wait = reset_delay(exc.response)
                if wait is not None:
                    logger.warning(
                        "Rate limit exceeded, sleeping %.0fs until reset", wait + buffer
                    )
                    await asyncio.sleep(wait + buffer)


class RateLimitMonitor:
    """Monitors GitHub API rate limit from response headers."""

    def __init__(self, threshold: int = 10) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_at = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            self._remaining = int(remaining)
        if reset_at is not None:
            self._reset_at = float(reset_at)

    async def wait_if_needed(self) -> None:
        if (
            self._remaining is not None
            and self._remaining <= self._threshold
            and self._reset_at is not None
        ):
            wait_seconds = min(max(0, self._reset_at - time.time()) + 1, MAX_WAIT)
            logger.info("Rate limit nearly exhausted, pausing %.0fs", wait_seconds)
            await asyncio.sleep(wait_seconds)
            self._remaining = None
