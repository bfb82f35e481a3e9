"""Domain services for edgepurge."""

from edgepurge.core.services.admin import (
    AdminAction,
    AdminResult,
    AdminService,
    CheckConnection,
    ClearQueue,
    ForceProcess,
    SaveSettings,
    Status,
)
from edgepurge.core.services.batch_drainer import (
    DRAIN_HOOK,
    BatchDrainer,
    DrainResult,
    DrainStatus,
)
from edgepurge.core.services.invalidation_queue import InvalidationQueue
from edgepurge.core.services.item_resolver import ItemResolver
from edgepurge.core.services.orchestrator import InvalidationOrchestrator
from edgepurge.core.services.settings import (
    SettingsError,
    SettingsRepository,
    SettingsResult,
    sanitize_settings,
)
from edgepurge.core.services.url_normalizer import UrlNormalizer

__all__ = [
    "UrlNormalizer",
    "ItemResolver",
    "InvalidationQueue",
    "InvalidationOrchestrator",
    # Draining
    "BatchDrainer",
    "DrainResult",
    "DrainStatus",
    "DRAIN_HOOK",
    # Settings
    "SettingsError",
    "SettingsRepository",
    "SettingsResult",
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
]
