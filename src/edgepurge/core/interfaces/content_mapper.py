"""Content mapper interface."""

from typing import Protocol

from edgepurge.core.entities.change_event import Post, Term


class IContentMapper(Protocol):
    """Contract for turning content entities into public URLs.

    Implemented by the host content-management system. Every lookup returns
    None when the entity or view does not exist (no archive configured,
    feeds disabled, taxonomy not exposed through the resource API). Returned
    URLs may be unnormalized; the item resolver normalizes them.
    """

    def home_url(self) -> str | None:
        """Return the site root URL."""
        ...

    def feed_url(self) -> str | None:
        """Return the site-wide syndication feed URL."""
        ...

    def permalink(self, post: Post) -> str | None:
        """Return the canonical URL of a post."""
        ...

    def post_feed_url(self, post: Post) -> str | None:
        """Return the comments/syndication feed of a single post."""
        ...

    def post_type_archive_url(self, post_type: str) -> str | None:
        """Return the archive listing of a content type, if it has one."""
        ...

    def post_type_rest_base(self, post_type: str) -> str | None:
        """Return the resource API base of a content type, if exposed."""
        ...

    def rest_root(self) -> str | None:
        """Return the resource API root URL."""
        ...

    def rest_url(self, route: str) -> str | None:
        """Return the absolute URL of a resource API route.

        Args:
            route: Route relative to the API namespace, e.g. ``posts/12``.
        """
        ...

    def post_terms(self, post: Post) -> list[Term]:
        """Return every term attached to a post, across all taxonomies."""
        ...

    def term_url(self, term: Term) -> str | None:
        """Return the archive URL of a term."""
        ...

    def term_feed_url(self, term: Term) -> str | None:
        """Return the feed URL of a term."""
        ...

    def parent_term(self, term: Term) -> Term | None:
        """Return the parent of a term in a hierarchical taxonomy."""
        ...

    def taxonomy_rest_base(self, taxonomy: str) -> str | None:
        """Return the resource API base of a taxonomy, if exposed."""
        ...

    def supports_author(self, post_type: str) -> bool:
        """Check whether a content type carries authorship."""
        ...

    def author_url(self, author_id: int) -> str | None:
        """Return the author archive URL."""
        ...

    def author_feed_url(self, author_id: int) -> str | None:
        """Return the author feed URL."""
        ...
