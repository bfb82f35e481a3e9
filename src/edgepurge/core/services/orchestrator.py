"""Invalidation orchestrator - entry point for content change events."""

import logging
from collections.abc import Callable
from typing import Any

from edgepurge.core.entities.change_event import (
    ChangeEvent,
    EntityType,
    Post,
    Term,
    TermState,
)
from edgepurge.core.entities.purge_config import PurgeConfig
from edgepurge.core.entities.purge_item import InvalidationItem
from edgepurge.core.interfaces.option_store import StoreError
from edgepurge.core.interfaces.purge_client import IPurgeClient
from edgepurge.core.services.invalidation_queue import InvalidationQueue
from edgepurge.core.services.item_resolver import ItemResolver

logger = logging.getLogger(__name__)


class InvalidationOrchestrator:
    """Reacts to content changes by purging and queueing invalidation items.

    High-priority items are purged inline, before low-priority items are
    queued. Nothing here raises into the triggering action: a failed inline
    purge is logged and optionally queued for retry. Store problems and
    errors raised by the content mapper or purge client are logged too, so
    publishing content always succeeds.
    """

    def __init__(
        self,
        resolver: ItemResolver,
        purge_client: IPurgeClient,
        queue: InvalidationQueue,
        config: PurgeConfig | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            resolver: Computes the items for an entity.
            purge_client: Client for the inline purge.
            queue: Queue receiving low-priority items.
            config: Configuration. Uses defaults if not provided.
        """
        self._resolver = resolver
        self._purge_client = purge_client
        self._queue = queue
        self._config = config or PurgeConfig()

    @property
    def config(self) -> PurgeConfig:
        return self._config

    def should_handle(self, event: ChangeEvent) -> bool:
        """Check whether an event affects publicly visible URLs.

        Post autosaves and revisions are ignored, as are transitions that
        neither start nor end in the published state. Every term lifecycle
        event is handled, including deletion.
        """
        if event.entity_type is EntityType.POST:
            post = event.entity
            if not isinstance(post, Post) or post.is_autosave or post.is_revision:
                return False
            return event.touches_published

        if event.entity_type is EntityType.TERM:
            return isinstance(event.entity, Term) and isinstance(event.new_state, TermState)

        return False

    async def on_change(self, event: ChangeEvent) -> None:
        """Handle a content change event.

        Args:
            event: The state transition raised by the content system.
        """
        if not self.should_handle(event):
            logger.debug(
                "Ignoring %s change %s -> %s",
                event.entity_type.value, event.previous_state, event.new_state,
            )
            return

        entity = event.entity
        logger.debug(
            "%s %s changed from %s to %s",
            event.entity_type.value.capitalize(), entity.id,
            _state_name(event.previous_state), _state_name(event.new_state),
        )

        if isinstance(entity, Post):
            high = self._resolve("high", self._resolver.post_high_priority_items, entity)
            low = self._resolve("low", self._resolver.post_low_priority_items, entity)
        else:
            high = self._resolve("high", self._resolver.term_high_priority_items, entity)
            low = self._resolve("low", self._resolver.term_low_priority_items, entity)

        if not await self._purge(high):
            logger.error(
                "Immediate purge of %d items failed for %s %s",
                len(high), event.entity_type.value, entity.id,
            )
            if self._config.requeue_failed_high_priority:
                # Queued ahead of the low-priority items
                low = high + low

        await self._enqueue(low)

    def _resolve(
        self,
        priority: str,
        resolve: Callable[[Any], list[InvalidationItem]],
        entity: Post | Term,
    ) -> list[InvalidationItem]:
        try:
            return resolve(entity)
        except Exception:
            logger.exception(
                "Could not resolve %s priority items for %s", priority, entity.id
            )
            return []

    async def _purge(self, items: list[InvalidationItem]) -> bool:
        try:
            return await self._purge_client.purge(items)
        except Exception:
            logger.exception("Immediate purge raised")
            return False

    async def _enqueue(self, items: list[InvalidationItem]) -> None:
        if not items:
            return
        try:
            await self._queue.enqueue(items)
        except StoreError as e:
            logger.error("Could not queue %d low priority items: %s", len(items), e)


def _state_name(state: object) -> str:
    if isinstance(state, TermState):
        return state.value
    return str(state)
