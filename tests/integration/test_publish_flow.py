"""End-to-end tests of the publish, queue and drain flow."""

import json

import httpx
import pytest
from conftest import SITE, FakeContentMapper, FakeTimer

from edgepurge import (
    ChangeEvent,
    ClearQueue,
    DrainStatus,
    ForceProcess,
    InMemoryOptionStore,
    InvalidationSystem,
    Post,
    PurgeConfig,
    SaveSettings,
    Status,
    Term,
    TermState,
    create_invalidation_system,
)


class CloudflareStub:
    """Records purge requests and answers like the Cloudflare API."""

    def __init__(self) -> None:
        self.bodies: list[dict] = []
        self.fail = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        if self.fail:
            return httpx.Response(
                500,
                json={"success": False, "errors": [{"code": 10013, "message": "Internal"}]},
            )
        return httpx.Response(200, json={"success": True, "errors": []})

    def purged(self, field: str) -> list[str]:
        return [url for body in self.bodies for url in body.get(field, [])]


@pytest.fixture
def cloudflare() -> CloudflareStub:
    return CloudflareStub()


@pytest.fixture
def system(
    cloudflare: CloudflareStub,
    mapper: FakeContentMapper,
    timer: FakeTimer,
    config: PurgeConfig,
) -> InvalidationSystem:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(cloudflare))
    system = create_invalidation_system(
        InMemoryOptionStore(),
        mapper,
        config=config,
        timer=timer,
        http_client=http_client,
    )
    system.activate()
    return system


class TestPublishFlow:
    """Tests for a post moving through publish, queue and drain."""

    @pytest.mark.asyncio
    async def test_publish_then_drain(
        self, system: InvalidationSystem, cloudflare: CloudflareStub, post: Post
    ) -> None:
        """Test that high priority URLs go out inline and the rest on the timer."""
        await system.on_change(ChangeEvent.for_post(post, "draft", "publish"))

        assert f"{SITE}/2024/05/hello-world/" in cloudflare.purged("files")
        assert f"{SITE}/" in cloudflare.purged("files")
        assert cloudflare.purged("prefixes") == []
        assert await system.queue.size() == 14

        cloudflare.bodies.clear()
        result = await system.process_queue()

        assert result.status is DrainStatus.PURGED
        assert result.remaining == 0
        assert "example.com/category/news" in cloudflare.purged("prefixes")
        assert "example.com/author/jdoe" in cloudflare.purged("prefixes")
        assert f"{SITE}/wp-json/wp/v2/users/7/" in cloudflare.purged("files")

    @pytest.mark.asyncio
    async def test_outage_then_recovery(
        self,
        system: InvalidationSystem,
        cloudflare: CloudflareStub,
        config: PurgeConfig,
        post: Post,
    ) -> None:
        """Test that items survive a CDN outage and drain in batches afterwards."""
        config.batch_size = 10
        cloudflare.fail = True

        await system.on_change(ChangeEvent.for_post(post, "draft", "publish"))
        # 6 high priority items requeued ahead of 14 low priority items
        assert await system.queue.size() == 20

        result = await system.process_queue()
        assert result.status is DrainStatus.FAILED
        assert await system.queue.size() == 20

        cloudflare.fail = False
        first = await system.process_queue()
        second = await system.process_queue()
        third = await system.process_queue()

        assert (first.remaining, second.remaining) == (10, 0)
        assert third.status is DrainStatus.EMPTY
        assert f"{SITE}/2024/05/hello-world/" in cloudflare.purged("files")

    @pytest.mark.asyncio
    async def test_deleted_term(
        self,
        system: InvalidationSystem,
        cloudflare: CloudflareStub,
        mapper: FakeContentMapper,
    ) -> None:
        """Test that a deleted term is purged from its pre-deletion URL."""
        term = Term(
            id=20, taxonomy="post_tag", slug="old-news", url=f"{SITE}/tag/old-news/"
        )
        mapper.deleted_terms.add(20)

        await system.on_change(ChangeEvent.for_term(term, TermState.DELETED))
        await system.process_queue()

        assert f"{SITE}/tag/old-news/" in cloudflare.purged("files")
        assert "example.com/tag/old-news" in cloudflare.purged("prefixes")

    @pytest.mark.asyncio
    async def test_admin_status_and_clear(
        self, system: InvalidationSystem, post: Post
    ) -> None:
        """Test the operator view of a populated queue."""
        await system.on_change(ChangeEvent.for_post(post, "publish", "trash"))

        status = await system.admin.dispatch(Status(max_items=3))
        assert status.payload["pending"] == 14
        assert len(status.payload["queued"]) == 3
        assert status.payload["scheduled"] is True

        await system.admin.dispatch(ClearQueue())
        result = await system.admin.dispatch(ForceProcess())
        assert result.payload["status"] == "empty"

    @pytest.mark.asyncio
    async def test_lost_timer_is_restored(
        self, system: InvalidationSystem, timer: FakeTimer
    ) -> None:
        """Test that a vanished schedule is re-registered by the next run."""
        timer.scheduled.clear()

        await system.process_queue()

        assert system.drainer.hook in timer.scheduled

    @pytest.mark.asyncio
    async def test_unsendable_token_never_raises(
        self,
        system: InvalidationSystem,
        cloudflare: CloudflareStub,
        config: PurgeConfig,
        post: Post,
    ) -> None:
        """Test that a token httpx cannot encode fails purges without raising."""
        config.api_token = "tokén"

        await system.on_change(ChangeEvent.for_post(post, "draft", "publish"))
        result = await system.process_queue()

        assert result.status is DrainStatus.FAILED
        assert await system.queue.size() == 20
        assert cloudflare.bodies == []

    @pytest.mark.asyncio
    async def test_saving_unsendable_token_is_rejected(
        self, system: InvalidationSystem, config: PurgeConfig
    ) -> None:
        """Test that the settings form keeps the working token."""
        result = await system.admin.dispatch(
            SaveSettings({"zone_id": "zone123", "api_token": "töken"})
        )

        assert not result.success
        assert result.payload["errors"][0]["code"] == "invalid_api_token"
        assert config.api_token == "token123"
