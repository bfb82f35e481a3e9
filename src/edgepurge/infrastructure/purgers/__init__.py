"""CDN purge clients."""

from edgepurge.infrastructure.purgers.cloudflare import (
    API_BASE_URL,
    MAX_ITEMS_PER_REQUEST,
    CloudflarePurgeClient,
)

__all__ = [
    "API_BASE_URL",
    "MAX_ITEMS_PER_REQUEST",
    "CloudflarePurgeClient",
]
