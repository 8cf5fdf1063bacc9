"""Bounded fan-out of independent remote calls."""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_bounded(
    factories: Sequence[Callable[[], Awaitable[T]]],
    limit: int,
) -> list[T]:
    """Run coroutine factories with at most ``limit`` in flight.

    Results come back in the order of ``factories``. The first exception
    cancels the remaining tasks and is re-raised; callers that want
    per-item degradation catch inside their factory.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def run(factory: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await factory()

    tasks = [asyncio.create_task(run(factory)) for factory in factories]
    if not tasks:
        return []

    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Cancelled {len(pending)} pending task(s)")
            await asyncio.gather(*pending, return_exceptions=True)
        raise
