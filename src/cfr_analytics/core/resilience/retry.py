"""Retry loop for backend requests."""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from cfr_analytics.core.resilience.models import SleepFunc

T = TypeVar("T")


def backoff_delay(
    attempt: int,
    *,
    base_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
    jitter: bool = True,
    rng: Optional[random.Random] = None,
) -> float:
    """Delay before retry number ``attempt + 1``.

    The delay doubles (by default) per attempt up to ``max_delay``; with
    jitter it is then scaled by a random factor in [0.5, 1.5).
    """
    delay = min(base_delay * exponential_base**attempt, max_delay)
    if jitter:
        delay *= 0.5 + (rng or random).random()
    return delay


async def async_retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 8.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    rng: Optional[random.Random] = None,
    sleep_func: Optional[SleepFunc] = None,
) -> T:
    """Await ``func()`` until it succeeds or retrying stops making sense.

    A failure is re-raised unchanged when ``max_retries`` retries have
    already been spent, or when ``should_retry`` says the error is permanent
    (a 4xx, say). Otherwise the loop sleeps for :func:`backoff_delay` and
    tries again. ``rng`` and ``sleep_func`` exist so tests can make the
    delays deterministic and instant.
    """
    wait = sleep_func or asyncio.sleep
    retries_used = 0
    while True:
        try:
            return await func()
        except Exception as e:
            permanent = should_retry is not None and not should_retry(e)
            if permanent or retries_used >= max_retries:
                raise
            await wait(
                backoff_delay(
                    retries_used,
                    base_delay=base_delay,
                    max_delay=max_delay,
                    exponential_base=exponential_base,
                    jitter=jitter,
                    rng=rng,
                )
            )
            retries_used += 1
