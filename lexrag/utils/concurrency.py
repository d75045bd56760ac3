"""Bounded fan-out for embedding calls.

:func:`throttled_gather` is ``asyncio.gather`` with a semaphore around each
awaitable.  The vector store uses it to embed an insert batch concurrently
without exceeding the embedding service's rate limits.  Results keep the
order of the input awaitables regardless of completion order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore``-many at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute.
    semaphore:
        Limits how many awaitables run at once.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input awaitables.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await asyncio.gather(
        *(_wrapped(c) for c in coros), return_exceptions=return_exceptions
    )
