"""Purge client interface."""

from typing import Protocol

from edgepurge.core.entities.purge_item import InvalidationItem


class IPurgeClient(Protocol):
    """Contract for sending invalidation items to a CDN.

    Implementations split items by kind and respect the provider's
    per-request ceilings. Failures are reported through the return value;
    transport problems must not escape as exceptions.
    """

    async def purge(self, items: list[InvalidationItem]) -> bool:
        """Purge every item.

        Args:
            items: Normalized items, files and prefixes mixed.

        Returns:
            True only if every request sent for these items succeeded.
            An empty list is trivially successful.
        """
        ...
