"""Recurring timer implementations."""

from edgepurge.infrastructure.timers.asyncio_timer import AsyncioIntervalTimer

__all__ = ["AsyncioIntervalTimer"]
