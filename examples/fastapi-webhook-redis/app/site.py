"""Content mapper for a WordPress-style site described by webhook payloads."""

from edgepurge import Post, Term

# Post types exposing an archive and a REST collection
ARCHIVES = {"post": "blog"}
REST_BASES = {"post": "posts", "page": "pages"}
TAXONOMIES = {
    # taxonomy: (permalink base, REST base)
    "category": ("category", "categories"),
    "post_tag": ("tag", "tags"),
}


class SiteMapper:
    """Maps posts, terms and authors to the URLs of one site.

    Permalinks, term assignments and author slugs are learned from the
    webhook payloads, so the mapper only knows what it has been told.
    """

    def __init__(self, site_url: str) -> None:
        self.site_url = site_url.rstrip("/")
        self.permalinks: dict[int, str] = {}
        self.post_term_ids: dict[int, list[int]] = {}
        self.terms: dict[int, Term] = {}
        self.authors: dict[int, str] = {}

    def remember_post(
        self,
        post: Post,
        permalink: str | None,
        terms: list[Term],
        author_slug: str | None,
    ) -> None:
        if permalink:
            self.permalinks[post.id] = permalink
        for term in terms:
            self.terms[term.id] = term
        self.post_term_ids[post.id] = [term.id for term in terms]
        if post.author_id is not None and author_slug:
            self.authors[post.author_id] = author_slug

    def remember_term(self, term: Term, deleted: bool = False) -> None:
        if deleted:
            self.terms.pop(term.id, None)
        else:
            self.terms[term.id] = term

    def home_url(self) -> str | None:
        return f"{self.site_url}/"

    def feed_url(self) -> str | None:
        return f"{self.site_url}/feed/"

    def permalink(self, post: Post) -> str | None:
        return self.permalinks.get(post.id)

    def post_feed_url(self, post: Post) -> str | None:
        permalink = self.permalink(post)
        return f"{permalink.rstrip('/')}/feed/" if permalink else None

    def post_type_archive_url(self, post_type: str) -> str | None:
        base = ARCHIVES.get(post_type)
        return f"{self.site_url}/{base}/" if base else None

    def post_type_rest_base(self, post_type: str) -> str | None:
        return REST_BASES.get(post_type)

    def rest_root(self) -> str | None:
        return f"{self.site_url}/wp-json/"

    def rest_url(self, route: str) -> str | None:
        return f"{self.site_url}/wp-json/wp/v2/{route.lstrip('/')}"

    def post_terms(self, post: Post) -> list[Term]:
        ids = self.post_term_ids.get(post.id, [])
        return [self.terms[i] for i in ids if i in self.terms]

    def term_url(self, term: Term) -> str | None:
        if term.id not in self.terms or term.taxonomy not in TAXONOMIES:
            return None
        return f"{self.site_url}/{TAXONOMIES[term.taxonomy][0]}/{term.slug}/"

    def term_feed_url(self, term: Term) -> str | None:
        url = self.term_url(term)
        return f"{url}feed/" if url else None

    def parent_term(self, term: Term) -> Term | None:
        return self.terms.get(term.parent_id) if term.parent_id else None

    def taxonomy_rest_base(self, taxonomy: str) -> str | None:
        entry = TAXONOMIES.get(taxonomy)
        return entry[1] if entry else None

    def supports_author(self, post_type: str) -> bool:
        return post_type == "post"

    def author_url(self, author_id: int) -> str | None:
        slug = self.authors.get(author_id)
        return f"{self.site_url}/author/{slug}/" if slug else None

    def author_feed_url(self, author_id: int) -> str | None:
        url = self.author_url(author_id)
        return f"{url}feed/" if url else None
