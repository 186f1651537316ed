"""
Bounded-concurrency batch runner.

Items are split into groups of ``batch_size``. Groups run one after another;
items inside a group run concurrently, capped by a semaphore of
``min(batch_size, max_concurrency)`` so the shared database connection is
never flooded. Results come back flattened in input order.

The first failure cancels the rest of its group and is re-raised unchanged;
later groups never start.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 10

T = TypeVar("T")
R = TypeVar("R")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive groups of at most ``size``."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def _run_group(
    group: list[T],
    processor: Callable[[T], Awaitable[R]],
    semaphore: asyncio.Semaphore,
) -> list[R]:
    async def bounded(item: T) -> R:
        async with semaphore:
            return await processor(item)

    tasks = [asyncio.ensure_future(bounded(item)) for item in group]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled siblings unwind before the error leaves the group
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def run_batched(
    items: Sequence[T],
    batch_size: int,
    processor: Callable[[T], Awaitable[R]],
    max_concurrency: int = MAX_CONCURRENCY,
) -> list[R]:
    """
    Apply ``processor`` to every item in sequential, internally concurrent batches.

    Args:
        items: Inputs, processed in groups of ``batch_size``
        batch_size: Group size
        processor: Async function applied to each item
        max_concurrency: Hard ceiling on in-flight calls within a group

    Returns:
        Results in the same order as ``items``
    """
    semaphore = asyncio.Semaphore(max(1, min(batch_size, max_concurrency)))
    results: list[R] = []

    for group in chunked(items, batch_size):
        started = time.perf_counter()
        logger.debug(f"Starting batch of {len(group)} items")
        results.extend(await _run_group(group, processor, semaphore))
        elapsed = round((time.perf_counter() - started) * 1000, 1)
        logger.debug(f"Completed batch of {len(group)} items in {elapsed}ms")

    return results
