"""FastAPI + Redis + edgepurge example.

The content system calls the webhook endpoints on every post status
transition and term change; the admin endpoints expose the operator
actions.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from edgepurge_redis import RedisOptionStore
from fastapi import FastAPI
from pydantic import BaseModel, Field

from app.site import SiteMapper
from edgepurge import (
    AdminResult,
    ChangeEvent,
    CheckConnection,
    ClearQueue,
    ForceProcess,
    Post,
    PurgeConfig,
    SaveSettings,
    Status,
    Term,
    TermState,
    create_invalidation_system,
)

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
SITE_URL = os.getenv("SITE_URL", "https://example.com")

logging.basicConfig(level=logging.INFO)

config = PurgeConfig(
    zone_id=os.getenv("CLOUDFLARE_ZONE_ID", ""),
    api_token=os.getenv("CLOUDFLARE_API_TOKEN", ""),
    debug_mode=os.getenv("DEBUG", "false").lower() == "true",
    key_prefix="webhook-example",
)

store = RedisOptionStore(redis_url=REDIS_URL)
mapper = SiteMapper(SITE_URL)
system = create_invalidation_system(store, mapper, config=config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    print(f"[STARTUP] Connecting to Redis at {REDIS_URL}")
    await system.load_settings()
    system.activate()
    yield
    print("[SHUTDOWN] Stopping drain timer and closing connections")
    await system.aclose()
    await store.close()


app = FastAPI(
    title="edgepurge Webhook Example",
    description="Cloudflare cache invalidation driven by content webhooks",
    version="1.0.0",
    lifespan=lifespan,
)


class TermPayload(BaseModel):
    id: int
    taxonomy: str
    slug: str = ""
    parent_id: int | None = None
    url: str | None = None

    def to_term(self) -> Term:
        return Term(
            id=self.id,
            taxonomy=self.taxonomy,
            slug=self.slug,
            parent_id=self.parent_id,
            url=self.url,
        )


class PostPayload(BaseModel):
    id: int
    post_type: str = "post"
    previous_status: str
    new_status: str
    permalink: str | None = None
    author_id: int | None = None
    author_slug: str | None = None
    is_revision: bool = False
    is_autosave: bool = False
    terms: list[TermPayload] = Field(default_factory=list)


class TermEventPayload(TermPayload):
    state: TermState


def _response(result: AdminResult) -> dict[str, Any]:
    return {
        "message": result.message,
        "success": result.success,
        "details": result.details,
        **result.payload,
    }


@app.post("/events/post")
async def post_changed(payload: PostPayload):
    """Handle a post status transition."""
    post = Post(
        id=payload.id,
        post_type=payload.post_type,
        author_id=payload.author_id,
        is_revision=payload.is_revision,
        is_autosave=payload.is_autosave,
    )
    mapper.remember_post(
        post,
        payload.permalink,
        [t.to_term() for t in payload.terms],
        payload.author_slug,
    )
    await system.on_change(
        ChangeEvent.for_post(post, payload.previous_status, payload.new_status)
    )
    return {"status": "accepted", "pending": await system.queue.size()}


@app.post("/events/term")
async def term_changed(payload: TermEventPayload):
    """Handle a term creation, edit or deletion."""
    term = payload.to_term()
    if payload.state is not TermState.DELETED:
        mapper.remember_term(term)
    await system.on_change(ChangeEvent.for_term(term, payload.state))
    if payload.state is TermState.DELETED:
        mapper.remember_term(term, deleted=True)
    return {"status": "accepted", "pending": await system.queue.size()}


@app.get("/admin/status")
async def admin_status(max_items: int = 50):
    """Show the queue, the timer and the last drain run."""
    return _response(await system.admin.dispatch(Status(max_items=max_items)))


@app.post("/admin/clear-queue")
async def admin_clear_queue():
    """Discard every pending invalidation item."""
    return _response(await system.admin.dispatch(ClearQueue()))


@app.post("/admin/test-connection")
async def admin_test_connection():
    """Check the configured Cloudflare credentials."""
    return _response(await system.admin.dispatch(CheckConnection()))


@app.post("/admin/process")
async def admin_process():
    """Drain one batch now."""
    return _response(await system.admin.dispatch(ForceProcess()))


@app.post("/admin/settings")
async def admin_settings(values: dict[str, Any]):
    """Save settings submitted by the settings form."""
    return _response(await system.admin.dispatch(SaveSettings(values)))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timer_scheduled": system.drainer.ensure_scheduled(),
        "credentials": config.has_credentials,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
