"""Invalidation item value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PurgeType(Enum):
    """Shape of a CDN purge target.

    FILE: An exact resource URL. Purging it evicts only that resource.
    PREFIX: A scheme-less ``host/path`` prefix. The CDN evicts every cached
        URL starting with it, which covers all pages of a paginated listing.
    """

    FILE = "file"
    PREFIX = "prefix"


@dataclass(frozen=True)
class InvalidationItem:
    """Immutable purge target.

    Two items are equal iff both ``kind`` and ``url`` match, so the dataclass
    equality doubles as the queue's deduplication key. Instances should only
    be created through ``UrlNormalizer``, which guarantees ``url`` is already
    in canonical form for its kind.
    """

    kind: PurgeType
    url: str

    @property
    def key(self) -> tuple[str, str]:
        """Return the ``(kind, url)`` deduplication key."""
        return (self.kind.value, self.url)

    @property
    def is_file(self) -> bool:
        return self.kind is PurgeType.FILE

    @property
    def is_prefix(self) -> bool:
        return self.kind is PurgeType.PREFIX

    def to_dict(self) -> dict[str, str]:
        """Return the persisted ``{kind, url}`` representation."""
        return {"kind": self.kind.value, "url": self.url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InvalidationItem":
        """Rebuild an item from its persisted representation.

        Args:
            data: Mapping with ``kind`` and ``url`` entries.

        Returns:
            The corresponding InvalidationItem.

        Raises:
            ValueError: If ``kind`` is unknown or ``url`` is missing.
        """
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise ValueError(f"Invalid purge item url: {url!r}")
        return cls(kind=PurgeType(data.get("kind")), url=url)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.url}"
