"""Splits batch requests into backend-sized chunks and drives them in order."""

from typing import Awaitable, Callable, List, Sequence, TypeVar

T = TypeVar("T")
A = TypeVar("A")


def chunk(items: Sequence[T], limit: int) -> List[List[T]]:
    if limit < 1:
        raise ValueError(f"chunk limit must be a positive integer, got {limit}")
    return [list(items[pos: pos + limit]) for pos in range(0, len(items), limit)]


async def apply_in_chunks(
    items: Sequence[T],
    limit: int,
    step: Callable[[A, List[T]], Awaitable[A]],
    initial: A,
) -> A:
    """Fold ``step`` over the chunks of ``items``.

    Chunks are awaited one at a time; chunk n+1 is not issued until chunk n
    returns. An exception aborts the fold and earlier chunks are not undone.
    """
    accumulated = initial
    for batch in chunk(items, limit):
        accumulated = await step(accumulated, batch)
    return accumulated
