"""Core interfaces (Protocol classes) for edgepurge."""

from edgepurge.core.interfaces.content_mapper import IContentMapper
from edgepurge.core.interfaces.option_store import IOptionStore, StoreError
from edgepurge.core.interfaces.purge_client import IPurgeClient
from edgepurge.core.interfaces.serializer import ISerializer
from edgepurge.core.interfaces.timer import ITimer

__all__ = [
    "IContentMapper",
    "IOptionStore",
    "IPurgeClient",
    "ISerializer",
    "ITimer",
    "StoreError",
]
