"""Option store backends."""

from edgepurge.infrastructure.backends.memory import InMemoryOptionStore

__all__ = ["InMemoryOptionStore"]
