"""Wait strategies for concurrent operations.

Example:
    >>> refs = await gather_all(
    ...     resolver.resolve(a, "attachment", "requester-attachment-1"),
    ...     resolver.resolve(b, "attachment", "requester-attachment-2"),
    ... )
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


async def gather_all(*coros: Awaitable[T]) -> list[T]:
    """Run all awaitables concurrently and return their results in input order.

    The first failure cancels every sibling still running and is re-raised
    as-is (not wrapped in an ExceptionGroup). No partial result is returned.

    Args:
        *coros: Awaitables to execute

    Returns:
        List of results in the same order as the inputs
    """
    if not coros:
        return []
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for t in tasks:
            if t in done and not t.cancelled() and (exc := t.exception()) is not None:
                raise exc
        return [t.result() for t in tasks]
    finally:
        for t in tasks:
            if not t.done():
                t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
