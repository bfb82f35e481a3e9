"""Utility helpers for edgepurge."""

from edgepurge.utils.batching import chunked
from edgepurge.utils.logging_config import set_debug_mode

__all__ = [
    "chunked",
    "set_debug_mode",
]
