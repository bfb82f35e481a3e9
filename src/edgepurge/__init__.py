"""edgepurge - CDN edge-cache invalidation orchestrator.

Purges the URLs affected by a content change on Cloudflare. URLs the reader
sees first (the permalink, the home page, the REST item) are purged
immediately; the expensive derived views (archives, feeds, taxonomy and
author listings) are queued, deduplicated, and purged in rate-limited
batches by a recurring timer.

Example:
    from edgepurge import (
        ChangeEvent,
        InMemoryOptionStore,
        Post,
        PurgeConfig,
        create_invalidation_system,
    )

    config = PurgeConfig(zone_id="023e105f4ecef8ad9ca31a8372d0c353",
                         api_token="...", batch_size=30)
    system = create_invalidation_system(
        store=InMemoryOptionStore(),
        mapper=MySiteMapper(),   # implements IContentMapper
        config=config,
    )
    system.activate()

    # Called by the content system on every status transition
    await system.on_change(
        ChangeEvent.for_post(Post(id=42, author_id=7), "draft", "publish")
    )

Admin actions:
    from edgepurge import ClearQueue, Status

    result = await system.admin.dispatch(Status(max_items=20))
    print(result.payload["pending"])
"""

from edgepurge.core.entities import (
    DEFAULT_BATCH_SIZE,
    PUBLISHED,
    ChangeEvent,
    ConnectionResult,
    EntityType,
    InvalidationItem,
    Post,
    PurgeConfig,
    PurgeType,
    Term,
    TermState,
)
from edgepurge.core.interfaces import (
    IContentMapper,
    IOptionStore,
    IPurgeClient,
    ISerializer,
    ITimer,
    StoreError,
)
from edgepurge.core.services import (
    DRAIN_HOOK,
    AdminAction,
    AdminResult,
    AdminService,
    BatchDrainer,
    CheckConnection,
    ClearQueue,
    DrainResult,
    DrainStatus,
    ForceProcess,
    InvalidationOrchestrator,
    InvalidationQueue,
    ItemResolver,
    SaveSettings,
    SettingsRepository,
    Status,
    UrlNormalizer,
    sanitize_settings,
)
from edgepurge.factory import InvalidationSystem, create_invalidation_system
from edgepurge.infrastructure import (
    AsyncioIntervalTimer,
    CloudflarePurgeClient,
    InMemoryOptionStore,
    JsonSerializer,
    SerializationError,
)
from edgepurge.utils import set_debug_mode

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "ChangeEvent",
    "ConnectionResult",
    "EntityType",
    "InvalidationItem",
    "Post",
    "PurgeConfig",
    "PurgeType",
    "Term",
    "TermState",
    "PUBLISHED",
    "DEFAULT_BATCH_SIZE",
    # Core interfaces
    "IContentMapper",
    "IOptionStore",
    "IPurgeClient",
    "ISerializer",
    "ITimer",
    "StoreError",
    # Core services
    "UrlNormalizer",
    "ItemResolver",
    "InvalidationQueue",
    "InvalidationOrchestrator",
    "BatchDrainer",
    "DrainResult",
    "DrainStatus",
    "DRAIN_HOOK",
    "SettingsRepository",
    "sanitize_settings",
    # Admin
    "AdminAction",
    "AdminResult",
    "AdminService",
    "CheckConnection",
    "ClearQueue",
    "ForceProcess",
    "SaveSettings",
    "Status",
    # Wiring
    "InvalidationSystem",
    "create_invalidation_system",
    # Infrastructure implementations
    "AsyncioIntervalTimer",
    "CloudflarePurgeClient",
    "InMemoryOptionStore",
    "JsonSerializer",
    "SerializationError",
    # Logging
    "set_debug_mode",
]
