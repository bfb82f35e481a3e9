"""Batching utilities for purge requests."""

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of at most ``size`` items.

    Args:
        items: The sequence to split.
        size: Maximum slice length, at least 1.

    Returns:
        Iterator over lists preserving the original order.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
