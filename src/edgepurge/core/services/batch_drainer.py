"""Batch drainer - periodically purges queued items in bounded batches."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from edgepurge.core.entities.purge_config import PurgeConfig
from edgepurge.core.interfaces.option_store import StoreError
from edgepurge.core.interfaces.purge_client import IPurgeClient
from edgepurge.core.interfaces.timer import ITimer
from edgepurge.core.services.invalidation_queue import InvalidationQueue

logger = logging.getLogger(__name__)

DRAIN_HOOK = "edgepurge_drain"


class DrainStatus(Enum):
    """Outcome of one drain run."""

    EMPTY = "empty"
    PURGED = "purged"
    FAILED = "failed"
    BUSY = "busy"
    ERROR = "error"


@dataclass(frozen=True)
class DrainResult:
    """Summary of one drain run, kept for the admin status view.

    Attributes:
        status: What happened.
        batch_size: Number of items sent to the CDN.
        remaining: Items left in the queue after the run.
        started_at: When the run began (UTC).
        duration: Run time in seconds.
    """

    status: DrainStatus
    batch_size: int
    remaining: int
    started_at: datetime
    duration: float

    @property
    def succeeded(self) -> bool:
        return self.status in (DrainStatus.EMPTY, DrainStatus.PURGED)


class BatchDrainer:
    """Drains the invalidation queue on a fixed interval.

    Each run takes one batch from the queue, purges it, and removes it from
    the queue only if every purge request succeeded. A failed or interrupted
    run leaves the queue exactly as it was, so items are purged at least
    once and retried on the next tick. Purges are idempotent, which makes
    the occasional repeated purge harmless.

    ``run`` is the single entry point for both the timer and on-demand
    processing. It also re-registers the timer if the schedule went missing.
    """

    def __init__(
        self,
        queue: InvalidationQueue,
        purge_client: IPurgeClient,
        timer: ITimer,
        config: PurgeConfig | None = None,
        hook: str = DRAIN_HOOK,
    ) -> None:
        """Initialize the drainer.

        Args:
            queue: The queue to drain.
            purge_client: Client used to purge each batch.
            timer: Recurring trigger collaborator.
            config: Configuration for batch size and interval.
            hook: Timer hook name.
        """
        self._queue = queue
        self._purge_client = purge_client
        self._timer = timer
        self._config = config or PurgeConfig()
        self._hook = hook
        self._draining = False
        self._last_result: DrainResult | None = None

    @property
    def config(self) -> PurgeConfig:
        return self._config

    @property
    def hook(self) -> str:
        return self._hook

    @property
    def is_draining(self) -> bool:
        """Check if a run is in progress."""
        return self._draining

    @property
    def last_result(self) -> DrainResult | None:
        """Return the result of the most recent run, if any."""
        return self._last_result

    @property
    def interval_seconds(self) -> float:
        interval = self._config.drain_interval
        return interval.total_seconds() if interval is not None else 60.0

    def next_run(self) -> datetime | None:
        """Return when the timer fires next."""
        return self._timer.next_run(self._hook)

    def ensure_scheduled(self) -> bool:
        """Register the drain timer if it is missing.

        Returns:
            True if the timer is scheduled after the call.
        """
        if self._timer.is_scheduled(self._hook):
            return True

        scheduled = self._timer.schedule(self._hook, self.interval_seconds)
        if scheduled:
            logger.warning("Drain timer was missing and has been rescheduled")
        else:
            logger.error("Drain timer was missing and rescheduling failed")
        return scheduled

    def unschedule(self) -> None:
        """Remove the drain timer."""
        self._timer.unschedule(self._hook)
        logger.debug("Drain timer cleared")

    async def run(self) -> DrainResult:
        """Process one batch from the queue.

        Returns:
            The result of this run. Never raises on purge or store failures.
        """
        self.ensure_scheduled()

        started_at = datetime.now(timezone.utc)
        start = time.monotonic()

        if self._draining:
            logger.debug("Drain already in progress, skipping run")
            return DrainResult(DrainStatus.BUSY, 0, 0, started_at, 0.0)

        self._draining = True
        try:
            status, batch_size, remaining = await self._drain_once()
        finally:
            self._draining = False

        result = DrainResult(
            status=status,
            batch_size=batch_size,
            remaining=remaining,
            started_at=started_at,
            duration=time.monotonic() - start,
        )
        self._last_result = result
        logger.debug(
            "Queue processing completed in %.4f seconds (%s)",
            result.duration, status.value,
        )
        return result

    async def _drain_once(self) -> tuple[DrainStatus, int, int]:
        batch_size = self._config.effective_batch_size

        try:
            batch, remainder = await self._queue.drain(batch_size)
        except StoreError as e:
            logger.error("Could not read invalidation queue: %s", e)
            return DrainStatus.ERROR, 0, 0

        if not batch:
            logger.debug("No items in queue to process")
            return DrainStatus.EMPTY, 0, 0

        total = len(batch) + len(remainder)
        logger.debug(
            "About to process batch of %d items from a total of %d in queue",
            len(batch), total,
        )

        if not await self._purge_client.purge(batch):
            logger.warning(
                "Failed to process %d items. Will retry in next run.", len(batch)
            )
            return DrainStatus.FAILED, len(batch), total

        try:
            remaining = await self._queue.commit(batch)
        except StoreError as e:
            # Items stay queued and are purged again next run
            logger.error("Purged batch but could not update queue: %s", e)
            return DrainStatus.ERROR, len(batch), total

        logger.info(
            "Successfully processed %d items. %d items remaining.",
            len(batch), remaining,
        )
        return DrainStatus.PURGED, len(batch), remaining
