"""Wiring of the invalidation components."""

import logging
from dataclasses import dataclass, fields

import httpx

from edgepurge.core.entities.change_event import ChangeEvent
from edgepurge.core.entities.purge_config import PurgeConfig
from edgepurge.core.interfaces.content_mapper import IContentMapper
from edgepurge.core.interfaces.option_store import IOptionStore
from edgepurge.core.interfaces.serializer import ISerializer
from edgepurge.core.interfaces.timer import ITimer
from edgepurge.core.services.admin import AdminService
from edgepurge.core.services.batch_drainer import BatchDrainer, DrainResult
from edgepurge.core.services.invalidation_queue import InvalidationQueue
from edgepurge.core.services.item_resolver import ItemResolver
from edgepurge.core.services.orchestrator import InvalidationOrchestrator
from edgepurge.core.services.settings import SettingsRepository
from edgepurge.core.services.url_normalizer import UrlNormalizer
from edgepurge.infrastructure.purgers.cloudflare import CloudflarePurgeClient
from edgepurge.infrastructure.serializers.json import JsonSerializer
from edgepurge.infrastructure.timers.asyncio_timer import AsyncioIntervalTimer
from edgepurge.utils.logging_config import set_debug_mode

logger = logging.getLogger(__name__)


@dataclass
class InvalidationSystem:
    """Every component of one invalidation setup, sharing one config.

    Attributes:
        config: Shared configuration, updated in place on settings changes.
        queue: Persistent low-priority queue.
        purge_client: Cloudflare client used inline and by the drainer.
        orchestrator: Entry point for content change events.
        drainer: Periodic batch drainer.
        settings: Settings and connection status persistence.
        admin: Operator actions.
        timer: Recurring trigger driving the drainer.
    """

    config: PurgeConfig
    queue: InvalidationQueue
    purge_client: CloudflarePurgeClient
    orchestrator: InvalidationOrchestrator
    drainer: BatchDrainer
    settings: SettingsRepository
    admin: AdminService
    timer: ITimer

    async def load_settings(self) -> bool:
        """Apply the stored settings to the shared config.

        Returns:
            True if stored settings were found and applied.
        """
        stored = await self.settings.load()
        if stored is None:
            return False
        for f in fields(stored):
            # The key prefix addresses the slots already in use
            if f.name != "key_prefix":
                setattr(self.config, f.name, getattr(stored, f.name))
        logger.debug("Loaded stored settings")
        return True

    def activate(self) -> bool:
        """Apply debug mode and register the drain timer.

        Returns:
            True if the timer is scheduled.
        """
        set_debug_mode(self.config.debug_mode)
        return self.drainer.ensure_scheduled()

    async def on_change(self, event: ChangeEvent) -> None:
        await self.orchestrator.on_change(event)

    async def process_queue(self) -> DrainResult:
        return await self.drainer.run()

    async def deactivate(self) -> None:
        """Unschedule the drain timer and discard pending items."""
        self.drainer.unschedule()
        await self.queue.clear()

    async def aclose(self) -> None:
        """Release the HTTP client and any timer tasks."""
        close_timer = getattr(self.timer, "aclose", None)
        if close_timer is not None:
            await close_timer()
        await self.purge_client.close()


def create_invalidation_system(
    store: IOptionStore,
    mapper: IContentMapper,
    config: PurgeConfig | None = None,
    timer: ITimer | None = None,
    http_client: httpx.AsyncClient | None = None,
    serializer: ISerializer | None = None,
) -> InvalidationSystem:
    """Build every component around one shared config.

    Args:
        store: Key-value store for settings, queue and connection status.
        mapper: Content system adapter mapping entities to URLs.
        config: Configuration. Uses defaults if not provided.
        timer: Recurring trigger. An ``AsyncioIntervalTimer`` bound to the
            drainer is created if None.
        http_client: Shared HTTP client for the Cloudflare API.
        serializer: Serializer for persisted slots. Defaults to JSON.

    Returns:
        The wired system. Call ``activate`` once an event loop is running.
    """
    config = config or PurgeConfig()
    serializer = serializer or JsonSerializer()

    queue = InvalidationQueue(
        store,
        serializer=serializer,
        key_prefix=config.key_prefix,
        max_size=config.queue_max_size,
    )
    purge_client = CloudflarePurgeClient(config, http_client=http_client)
    resolver = ItemResolver(mapper, UrlNormalizer())

    if timer is None:
        timer = AsyncioIntervalTimer()
    drainer = BatchDrainer(queue, purge_client, timer, config=config)
    if isinstance(timer, AsyncioIntervalTimer):
        timer.register(drainer.hook, drainer.run)

    orchestrator = InvalidationOrchestrator(resolver, purge_client, queue, config=config)
    settings = SettingsRepository(store, serializer=serializer, key_prefix=config.key_prefix)
    admin = AdminService(config, queue, drainer, purge_client, settings)

    return InvalidationSystem(
        config=config,
        queue=queue,
        purge_client=purge_client,
        orchestrator=orchestrator,
        drainer=drainer,
        settings=settings,
        admin=admin,
        timer=timer,
    )
