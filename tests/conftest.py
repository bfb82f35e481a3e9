"""Pytest configuration and shared fakes for edgepurge tests."""

from datetime import datetime, timedelta, timezone

import pytest

from edgepurge import (
    InMemoryOptionStore,
    InvalidationItem,
    InvalidationQueue,
    ItemResolver,
    Post,
    PurgeConfig,
    PurgeType,
    Term,
)

SITE = "https://example.com"


class FakeContentMapper:
    """Content mapper for a small blog at example.com."""

    def __init__(self) -> None:
        self.permalinks: dict[int, str] = {}
        self.terms: dict[int, Term] = {}
        self.post_term_ids: dict[int, list[int]] = {}
        self.authors: dict[int, str] = {}
        self.deleted_terms: set[int] = set()
        self.archives: dict[str, str] = {"post": f"{SITE}/blog/"}
        self.rest_bases: dict[str, str] = {"post": "posts", "page": "pages"}
        self.taxonomy_bases: dict[str, str] = {
            "category": "categories",
            "post_tag": "tags",
        }
        self.term_paths: dict[str, str] = {"category": "category", "post_tag": "tag"}

    def add_term(self, term: Term) -> Term:
        self.terms[term.id] = term
        return term

    def home_url(self) -> str | None:
        return f"{SITE}/"

    def feed_url(self) -> str | None:
        return f"{SITE}/feed/"

    def permalink(self, post: Post) -> str | None:
        return self.permalinks.get(post.id, f"{SITE}/{post.post_type}/{post.id}/")

    def post_feed_url(self, post: Post) -> str | None:
        permalink = self.permalink(post)
        return f"{permalink}feed/" if permalink else None

    def post_type_archive_url(self, post_type: str) -> str | None:
        return self.archives.get(post_type)

    def post_type_rest_base(self, post_type: str) -> str | None:
        return self.rest_bases.get(post_type)

    def rest_root(self) -> str | None:
        return f"{SITE}/wp-json/"

    def rest_url(self, route: str) -> str | None:
        return f"{SITE}/wp-json/wp/v2/{route}"

    def post_terms(self, post: Post) -> list[Term]:
        return [self.terms[i] for i in self.post_term_ids.get(post.id, [])]

    def term_url(self, term: Term) -> str | None:
        if term.id in self.deleted_terms:
            return None
        path = self.term_paths.get(term.taxonomy)
        if path is None:
            return None
        return f"{SITE}/{path}/{term.slug}/"

    def term_feed_url(self, term: Term) -> str | None:
        url = self.term_url(term)
        return f"{url}feed/" if url else None

    def parent_term(self, term: Term) -> Term | None:
        if term.parent_id is None:
            return None
        return self.terms.get(term.parent_id)

    def taxonomy_rest_base(self, taxonomy: str) -> str | None:
        return self.taxonomy_bases.get(taxonomy)

    def supports_author(self, post_type: str) -> bool:
        return post_type == "post"

    def author_url(self, author_id: int) -> str | None:
        name = self.authors.get(author_id)
        return f"{SITE}/author/{name}/" if name else None

    def author_feed_url(self, author_id: int) -> str | None:
        url = self.author_url(author_id)
        return f"{url}feed/" if url else None


class FakeTimer:
    """In-memory timer recording schedule calls."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.scheduled: dict[str, float] = {}
        self.schedule_calls: list[tuple[str, float]] = []
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def is_scheduled(self, hook: str) -> bool:
        return hook in self.scheduled

    def schedule(self, hook: str, interval: float) -> bool:
        self.schedule_calls.append((hook, interval))
        if self.fail:
            return False
        self.scheduled[hook] = interval
        return True

    def unschedule(self, hook: str) -> None:
        self.scheduled.pop(hook, None)

    def next_run(self, hook: str) -> datetime | None:
        interval = self.scheduled.get(hook)
        if interval is None:
            return None
        return self.now + timedelta(seconds=interval)


class FakePurgeClient:
    """Purge client recording every call.

    ``results`` is consumed one entry per call; when exhausted, ``succeed``
    decides the outcome.
    """

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.results: list[bool] = []
        self.calls: list[list[InvalidationItem]] = []

    async def purge(self, items: list[InvalidationItem]) -> bool:
        self.calls.append(list(items))
        if self.results:
            return self.results.pop(0)
        return self.succeed


def make_items(count: int, start: int = 0) -> list[InvalidationItem]:
    """Build distinct FILE items."""
    return [
        InvalidationItem(PurgeType.FILE, f"{SITE}/page/{i}/")
        for i in range(start, start + count)
    ]


@pytest.fixture
def mapper() -> FakeContentMapper:
    """Mapper with two categories and one author."""
    mapper = FakeContentMapper()
    mapper.add_term(Term(id=3, taxonomy="category", slug="news"))
    mapper.add_term(Term(id=4, taxonomy="category", slug="local", parent_id=3))
    mapper.authors[7] = "jdoe"
    mapper.permalinks[42] = f"{SITE}/2024/05/hello-world/"
    mapper.post_term_ids[42] = [3, 4]
    return mapper


@pytest.fixture
def resolver(mapper: FakeContentMapper) -> ItemResolver:
    return ItemResolver(mapper)


@pytest.fixture
def store() -> InMemoryOptionStore:
    return InMemoryOptionStore()


@pytest.fixture
def config() -> PurgeConfig:
    return PurgeConfig(zone_id="zone123", api_token="token123", batch_size=30)


@pytest.fixture
def queue(store: InMemoryOptionStore) -> InvalidationQueue:
    return InvalidationQueue(store)


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def purge_client() -> FakePurgeClient:
    return FakePurgeClient()


@pytest.fixture
def post() -> Post:
    """Post 42 by author 7, filed under news and local."""
    return Post(id=42, post_type="post", author_id=7)
