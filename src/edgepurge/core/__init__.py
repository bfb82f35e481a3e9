"""Core domain layer for edgepurge."""

from edgepurge.core.entities import (
    ChangeEvent,
    InvalidationItem,
    PurgeConfig,
    PurgeType,
)
from edgepurge.core.interfaces import (
    IContentMapper,
    IOptionStore,
    IPurgeClient,
    ISerializer,
    ITimer,
)
from edgepurge.core.services import (
    BatchDrainer,
    InvalidationOrchestrator,
    InvalidationQueue,
)

__all__ = [
    # Entities
    "ChangeEvent",
    "InvalidationItem",
    "PurgeConfig",
    "PurgeType",
    # Interfaces
    "IContentMapper",
    "IOptionStore",
    "IPurgeClient",
    "ISerializer",
    "ITimer",
    # Services
    "BatchDrainer",
    "InvalidationOrchestrator",
    "InvalidationQueue",
]
