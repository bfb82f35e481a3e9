"""Item resolver - maps changed entities to high and low priority purge items."""

import logging
from collections.abc import Iterable

from edgepurge.core.entities.change_event import Post, Term
from edgepurge.core.entities.purge_item import InvalidationItem, PurgeType
from edgepurge.core.interfaces.content_mapper import IContentMapper
from edgepurge.core.services.url_normalizer import UrlNormalizer

logger = logging.getLogger(__name__)

Candidate = tuple[str | None, PurgeType]

FILE = PurgeType.FILE
PREFIX = PurgeType.PREFIX


class ItemResolver:
    """Computes which URLs a content change invalidates.

    High-priority items are the few pages a visitor hits right after a
    publish action; they are purged inline. Low-priority items fan out over
    taxonomies, authors and API views, can be numerous, and are queued.

    Every entry point builds a flat list of ``(url, kind)`` candidates and
    hands it to ``create_items``, the single place where URLs are validated,
    normalized and deduplicated.
    """

    def __init__(
        self,
        mapper: IContentMapper,
        normalizer: UrlNormalizer | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            mapper: Content-management lookups for entity URLs.
            normalizer: URL normalizer. A default instance is used if None.
        """
        self._mapper = mapper
        self._normalizer = normalizer or UrlNormalizer()

    def create_items(self, candidates: Iterable[Candidate]) -> list[InvalidationItem]:
        """Normalize candidates and deduplicate them.

        Invalid or missing URLs are dropped. Duplicates are removed by
        ``(kind, url)`` while keeping the first-seen order.

        Args:
            candidates: ``(url, kind)`` pairs, url may be None.

        Returns:
            Ordered list of unique, normalized items.
        """
        items: list[InvalidationItem] = []
        seen: set[InvalidationItem] = set()
        for url, kind in candidates:
            if not url:
                continue
            item = self._normalizer.create_item(url, kind)
            if item is None or item in seen:
                continue
            seen.add(item)
            items.append(item)
        return items

    # Posts

    def post_high_priority_items(self, post: Post) -> list[InvalidationItem]:
        """Items to purge immediately when a post changes."""
        m = self._mapper
        candidates: list[Candidate] = [
            (m.permalink(post), FILE),
            (m.home_url(), FILE),
            # First page of the listing, purged exactly for immediate visibility
            (m.post_type_archive_url(post.post_type), FILE),
        ]

        rest_base = m.post_type_rest_base(post.post_type)
        if rest_base:
            candidates.extend([
                (m.rest_url(f"{rest_base}/{post.id}"), FILE),
                (m.rest_url(rest_base), FILE),
                (m.rest_root(), FILE),
            ])

        items = self.create_items(candidates)
        logger.debug(
            "Generated %d high priority items for post %s", len(items), post.id
        )
        return items

    def post_low_priority_items(self, post: Post) -> list[InvalidationItem]:
        """Items to queue when a post changes."""
        m = self._mapper
        candidates: list[Candidate] = [
            (m.post_type_archive_url(post.post_type), PREFIX),
            (m.feed_url(), FILE),
            (m.post_feed_url(post), FILE),
        ]

        for term in m.post_terms(post):
            candidates.extend(self._term_listing_candidates(term))

        if post.author_id is not None and m.supports_author(post.post_type):
            candidates.extend([
                (m.author_url(post.author_id), PREFIX),
                (m.author_feed_url(post.author_id), FILE),
                (m.rest_url(f"users/{post.author_id}"), FILE),
            ])

        candidates.append((m.rest_url("taxonomies"), FILE))

        items = self.create_items(candidates)
        logger.debug(
            "Generated %d low priority items for post %s", len(items), post.id
        )
        return items

    # Terms

    def term_high_priority_items(self, term: Term) -> list[InvalidationItem]:
        """Items to purge immediately when a term is created, edited or deleted."""
        m = self._mapper
        candidates: list[Candidate] = [
            (self._term_url(term), FILE),
            (m.home_url(), FILE),
        ]
        candidates.extend(self._term_rest_candidates(term))

        items = self.create_items(candidates)
        logger.debug(
            "Generated %d high priority items for term %s:%s",
            len(items), term.taxonomy, term.id,
        )
        return items

    def term_low_priority_items(self, term: Term) -> list[InvalidationItem]:
        """Items to queue when a term is created, edited or deleted."""
        m = self._mapper
        candidates: list[Candidate] = [
            (self._term_url(term), PREFIX),
            (m.term_feed_url(term), FILE),
        ]

        parent = m.parent_term(term) if term.parent_id else None
        if parent is not None:
            candidates.extend([
                (self._term_url(parent), PREFIX),
                (m.term_feed_url(parent), FILE),
            ])

        candidates.append((m.feed_url(), FILE))

        items = self.create_items(candidates)
        logger.debug(
            "Generated %d low priority items for term %s:%s",
            len(items), term.taxonomy, term.id,
        )
        return items

    def _term_url(self, term: Term) -> str | None:
        return self._mapper.term_url(term) or term.url

    def _term_listing_candidates(self, term: Term) -> list[Candidate]:
        """Archive, feed and API endpoints of a term attached to a post."""
        term_url = self._term_url(term)
        if not term_url:
            return []
        candidates: list[Candidate] = [
            (term_url, PREFIX),
            (self._mapper.term_feed_url(term), FILE),
        ]
        candidates.extend(self._term_rest_candidates(term))
        return candidates

    def _term_rest_candidates(self, term: Term) -> list[Candidate]:
        rest_base = self._mapper.taxonomy_rest_base(term.taxonomy)
        if not rest_base:
            return []
        return [
            (self._mapper.rest_url(f"{rest_base}/{term.id}"), FILE),
            (self._mapper.rest_url(rest_base), FILE),
        ]
