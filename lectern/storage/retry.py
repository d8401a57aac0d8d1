"""Bounded exponential backoff for idempotent record store reads."""

from __future__ import annotations

import asyncio
import functools
import logging
import typing as t
from collections.abc import Awaitable, Callable, Iterator

from .record import StoreUnavailableError

logger = logging.getLogger(__name__)

P = t.ParamSpec("P")
R = t.TypeVar("R")


class RetryPolicy(t.NamedTuple):
    attempts: int = 3
    base_delay: float = 0.05
    max_delay: float = 1.0

    def delays(self) -> Iterator[float]:
        for i in range(max(self.attempts, 1) - 1):
            yield min(self.max_delay, self.base_delay * 2**i)


class HasRetryPolicy(t.Protocol):
    retry: RetryPolicy


def retry_reads(
    fn: Callable[t.Concatenate[t.Any, P], Awaitable[R]],
) -> Callable[t.Concatenate[t.Any, P], Awaitable[R]]:
    """Retry a store method on StoreUnavailableError using the store's `retry` policy.

    Only for reads. Writes are never retried.
    """

    @functools.wraps(fn)
    async def wrapper(self: HasRetryPolicy, *args: P.args, **kwargs: P.kwargs) -> R:
        delays = self.retry.delays()
        while True:
            try:
                return await fn(self, *args, **kwargs)
            except StoreUnavailableError as e:
                delay = next(delays, None)
                if delay is None:
                    raise
                logger.warning(
                    "record store unavailable, retrying read",
                    extra={
                        "operation": fn.__name__,
                        "delay": delay,
                        "error": str(e),
                    },
                )
                await asyncio.sleep(delay)

    return wrapper
