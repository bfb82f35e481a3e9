"""URL normalizer - validates raw URLs and turns them into purge items."""

import logging
import re
from urllib.parse import SplitResult, urlsplit

from edgepurge.core.entities.purge_item import InvalidationItem, PurgeType

logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


class UrlNormalizer:
    """Canonicalizes raw URL strings into invalidation items.

    Malformed input is an expected, frequent case (deleted terms, missing
    API bases, disabled feeds), so every method signals failure by returning
    None instead of raising.
    """

    def normalize_as_file(self, raw_url: str | None) -> InvalidationItem | None:
        """Build an exact-URL purge item.

        The URL is rebuilt as ``scheme://host[:port]path`` without query
        string or fragment, an empty path becomes ``/`` and a trailing slash
        is always present. Normalizing the result again yields the same URL.

        Args:
            raw_url: The URL to normalize.

        Returns:
            A FILE item, or None if the URL is invalid or lacks scheme/host.
        """
        parts = self._split(raw_url)
        if parts is None:
            return None

        host = self._host(parts)
        if not parts.scheme or host is None:
            logger.debug("Missing scheme or host in URL: %r", raw_url)
            return None

        url = f"{parts.scheme}://{host}"
        if parts.port is not None:
            url += f":{parts.port}"
        url += parts.path or "/"
        if not url.endswith("/"):
            url += "/"

        if url != raw_url:
            logger.debug("Cleaned URL: %s -> %s", raw_url, url)
        return InvalidationItem(kind=PurgeType.FILE, url=url)

    def normalize_as_prefix(self, raw_url: str | None) -> InvalidationItem | None:
        """Build a path-prefix purge item.

        Prefixes are formatted as ``host/path`` with no scheme and no
        trailing slash. A query string cannot be expressed as a CDN prefix,
        so any input containing ``?`` is rejected.

        Args:
            raw_url: The URL to turn into a prefix.

        Returns:
            A PREFIX item, or None if the URL is invalid.
        """
        if raw_url and "?" in raw_url:
            logger.debug("URL contains query string, invalid for prefix: %s", raw_url)
            return None

        parts = self._split(raw_url)
        if parts is None:
            return None

        host = self._host(parts)
        if host is None:
            logger.debug("Missing host in URL: %r", raw_url)
            return None

        return InvalidationItem(
            kind=PurgeType.PREFIX,
            url=host + parts.path.rstrip("/"),
        )

    def create_item(
        self,
        raw_url: str | None,
        kind: PurgeType = PurgeType.FILE,
    ) -> InvalidationItem | None:
        """Normalize a URL as the given kind of item.

        Args:
            raw_url: The URL to normalize.
            kind: Which item shape to produce.

        Returns:
            The normalized item, or None if the URL is invalid.
        """
        if kind is PurgeType.PREFIX:
            return self.normalize_as_prefix(raw_url)
        return self.normalize_as_file(raw_url)

    def _split(self, raw_url: str | None) -> SplitResult | None:
        """Run generic URL syntax validation and split the URL."""
        if not raw_url or not isinstance(raw_url, str):
            logger.debug("Empty URL provided")
            return None
        if _INVALID_CHARS.search(raw_url):
            logger.debug("Invalid URL: %r", raw_url)
            return None

        try:
            parts = urlsplit(raw_url)
            # Accessing the port validates it
            parts.port
        except ValueError:
            logger.debug("Invalid URL: %r", raw_url)
            return None
        return parts

    def _host(self, parts: SplitResult) -> str | None:
        """Return the host without credentials or port, IPv6 bracketed."""
        host = parts.hostname
        if not host:
            return None
        if ":" in host:
            return f"[{host}]"
        return host
