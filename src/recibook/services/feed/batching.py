"""Partition / fan-out / merge helpers for stores that cap list filters.

A store that accepts at most N values in an ``in`` filter forces a large id
set into several queries. The per-batch results are combined and sorted
once by the same key.
"""

from __future__ import annotations

import asyncio
from itertools import chain, islice
from typing import TYPE_CHECKING, TypeVar


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Sequence


K = TypeVar("K")
T = TypeVar("T")


def chunked(items: Iterable[K], size: int) -> list[list[K]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        msg = f"size must be positive, got {size}"
        raise ValueError(msg)
    iterator = iter(items)
    chunks: list[list[K]] = []
    while batch := list(islice(iterator, size)):
        chunks.append(batch)
    return chunks


def merge_sorted_desc(
    batches: Iterable[Sequence[T]],
    key: Callable[[T], float],
) -> list[T]:
    """Combine ``batches`` into one list sorted by ``key``, largest first.

    Batches need not be sorted themselves. The sort is stable, so ties keep
    batch order: an item from an earlier batch comes first.
    """
    return sorted(chain.from_iterable(batches), key=key, reverse=True)


async def fan_out_merge(
    keys: Iterable[K],
    *,
    batch_size: int,
    fetch: Callable[[list[K]], Awaitable[Sequence[T]]],
    sort_key: Callable[[T], float],
) -> list[T]:
    """Run ``fetch`` once per batch of ``keys`` and merge the results.

    Batches are fetched concurrently. The first failure propagates
    and no partial result is returned.
    """
    batches = chunked(keys, batch_size)
    if not batches:
        return []
    results = await asyncio.gather(*(fetch(batch) for batch in batches))
    return merge_sorted_desc(results, sort_key)
