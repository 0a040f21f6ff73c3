"""Bounded exponential backoff for rate-limited OpenAI calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

import openai

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES = 3
BASE_DELAY = 5.0
_TRANSIENT_MARKERS = ("rate limit", "too many requests")


def is_transient_failure(exc: BaseException) -> bool:
    """Return True when the remote reported rate limiting."""
    if isinstance(exc, openai.RateLimitError):
        return True
    if getattr(exc, "status_code", None) == 429:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


async def call_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> Optional[T]:
    """Run `operation`, retrying on rate limiting with delays base, 2*base, 4*base.

    Args:
        operation: Zero-argument coroutine factory performing one remote call.
        max_retries: Retries after the first attempt.
        base_delay: Delay in seconds before the first retry.
        sleep: Awaitable sleep, defaults to asyncio.sleep.

    Returns:
        The operation result, or None if it failed permanently or every
        attempt was rate limited.
    """
    sleep = sleep or asyncio.sleep
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if not is_transient_failure(exc):
                LOGGER.error("Remote call failed: %s", exc)
                return None
            if attempt >= max_retries:
                LOGGER.error("Remote call still rate limited after %d retries", max_retries)
                return None
            wait = base_delay * (2 ** attempt)
            attempt += 1
            LOGGER.info("Rate limited, retrying in %.1fs (retry %d/%d)", wait, attempt, max_retries)
            await sleep(wait)
