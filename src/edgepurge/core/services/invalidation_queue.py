"""Invalidation queue - persisted, deduplicated set of deferred purge items."""

import logging
from collections.abc import Iterable

from edgepurge.core.entities.purge_config import DEFAULT_QUEUE_MAX_SIZE
from edgepurge.core.entities.purge_item import InvalidationItem
from edgepurge.core.interfaces.option_store import IOptionStore
from edgepurge.core.interfaces.serializer import ISerializer
from edgepurge.infrastructure.serializers.json import (
    JsonSerializer,
    SerializationError,
)

logger = logging.getLogger(__name__)

QUEUE_KEY = "queue"


class InvalidationQueue:
    """Low-priority items awaiting a batch purge.

    The queue lives in a single option store slot holding a list of
    ``{kind, url}`` mappings. Every write is a read-merge-write of that slot.
    Merging is duplicate-safe, so concurrent writers can only lose work to a
    pure overwrite race, which the drain cadence makes acceptable.

    ``drain`` never mutates state: the caller purges the batch and calls
    ``commit`` only when the whole batch succeeded.
    """

    def __init__(
        self,
        store: IOptionStore,
        serializer: ISerializer | None = None,
        key_prefix: str = "edgepurge",
        max_size: int | None = DEFAULT_QUEUE_MAX_SIZE,
    ) -> None:
        """Initialize the queue.

        Args:
            store: Option store holding the queue slot.
            serializer: Encoder for the slot contents. Defaults to JSON.
            key_prefix: Prefix of the slot name.
            max_size: Soft cap on queued items. None disables the cap.
        """
        self._store = store
        self._serializer = serializer or JsonSerializer()
        self._key = f"{key_prefix}:{QUEUE_KEY}"
        self._max_size = max_size

    @property
    def key(self) -> str:
        """Return the option store slot name."""
        return self._key

    async def items(self) -> list[InvalidationItem]:
        """Return the queued items in stored order."""
        data = await self._store.get(self._key)
        if data is None:
            return []

        try:
            raw_items = self._serializer.deserialize(data)
        except SerializationError as e:
            logger.error("Discarding unreadable queue contents: %s", e)
            return []
        if not isinstance(raw_items, list):
            logger.error("Discarding queue contents of type %s", type(raw_items).__name__)
            return []

        items: list[InvalidationItem] = []
        seen: set[InvalidationItem] = set()
        for raw in raw_items:
            try:
                item = InvalidationItem.from_dict(raw)
            except (ValueError, AttributeError):
                logger.debug("Skipping malformed queue entry: %r", raw)
                continue
            if item not in seen:
                seen.add(item)
                items.append(item)
        return items

    async def size(self) -> int:
        """Return the number of queued items."""
        return len(await self.items())

    async def enqueue(self, items: Iterable[InvalidationItem]) -> None:
        """Merge items into the queue.

        Items already queued are ignored. Nothing is written when the merge
        adds no new item. When the soft cap is exceeded, the oldest items are
        kept and the overflow is dropped.

        Args:
            items: Items to add.
        """
        current = await self.items()
        seen = set(current)
        new_items: list[InvalidationItem] = []
        for item in items:
            if item not in seen:
                seen.add(item)
                new_items.append(item)

        if not new_items:
            return

        merged = current + new_items
        if self._max_size is not None and len(merged) > self._max_size:
            dropped = len(merged) - self._max_size
            merged = merged[: self._max_size]
            logger.warning(
                "Invalidation queue is full (%d items), dropped %d new items",
                self._max_size, dropped,
            )

        await self._write(merged)
        logger.debug(
            "Queued %d new items. Total in queue: %d", len(new_items), len(merged)
        )

    async def drain(
        self, max_items: int
    ) -> tuple[list[InvalidationItem], list[InvalidationItem]]:
        """Split the queue into a batch and the remainder.

        Does not modify the stored queue.

        Args:
            max_items: Maximum batch size, at least 1.

        Returns:
            ``(batch, remainder)`` where batch holds the first ``max_items``
            items in stored order.
        """
        max_items = max(1, max_items)
        current = await self.items()
        return current[:max_items], current[max_items:]

    async def commit(self, batch: Iterable[InvalidationItem]) -> int:
        """Remove a successfully purged batch from the queue.

        The slot is re-read so items enqueued while the batch was being
        purged survive.

        Args:
            batch: Items returned by ``drain`` and purged successfully.

        Returns:
            Number of items remaining in the queue.
        """
        done = set(batch)
        remaining = [item for item in await self.items() if item not in done]
        await self._write(remaining)
        return len(remaining)

    async def clear(self) -> None:
        """Remove every queued item."""
        await self._store.delete(self._key)
        logger.debug("Invalidation queue cleared")

    async def _write(self, items: list[InvalidationItem]) -> None:
        if not items:
            await self._store.delete(self._key)
            return
        await self._store.set(self._key, self._serializer.serialize(items))
