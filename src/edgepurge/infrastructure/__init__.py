"""Infrastructure layer implementations for edgepurge."""

from edgepurge.infrastructure.backends import InMemoryOptionStore
from edgepurge.infrastructure.purgers import CloudflarePurgeClient
from edgepurge.infrastructure.serializers import JsonSerializer, SerializationError
from edgepurge.infrastructure.timers import AsyncioIntervalTimer

__all__ = [
    "InMemoryOptionStore",
    "CloudflarePurgeClient",
    "JsonSerializer",
    "SerializationError",
    "AsyncioIntervalTimer",
]
