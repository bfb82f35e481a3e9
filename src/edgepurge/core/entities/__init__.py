"""Domain entities for edgepurge."""

from edgepurge.core.entities.change_event import (
    PUBLISHED,
    ChangeEvent,
    EntityType,
    Post,
    Term,
    TermState,
)
from edgepurge.core.entities.connection_result import ConnectionResult
from edgepurge.core.entities.purge_config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_QUEUE_MAX_SIZE,
    MIN_BATCH_SIZE,
    PurgeConfig,
)
from edgepurge.core.entities.purge_item import InvalidationItem, PurgeType

__all__ = [
    "ConnectionResult",
    "InvalidationItem",
    "PurgeType",
    "PurgeConfig",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_QUEUE_MAX_SIZE",
    "MIN_BATCH_SIZE",
    # Change events
    "ChangeEvent",
    "EntityType",
    "Post",
    "Term",
    "TermState",
    "PUBLISHED",
]
