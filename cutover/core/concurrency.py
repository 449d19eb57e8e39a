import asyncio
from typing import Awaitable, Iterable, List, TypeVar

T = TypeVar("T")


async def gather_bounded(aws: Iterable[Awaitable[T]], limit: int) -> List[T]:
    """Run awaitables concurrently, at most `limit` at a time, preserving order."""
    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(aw: Awaitable[T]) -> T:
        async with semaphore:
            return await aw

    return await asyncio.gather(*(run(aw) for aw in aws))


def chunked(items: List[T], size: int) -> List[List[T]]:
    size = max(1, size)
    return [items[i:i + size] for i in range(0, len(items), size)]
