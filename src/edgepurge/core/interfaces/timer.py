"""Timer interface."""

from datetime import datetime
from typing import Protocol


class ITimer(Protocol):
    """Contract for the recurring trigger that drives queue draining.

    Hooks are identified by name. The timer owns the mapping from hook name
    to callback; the core only checks and (re)registers the schedule.
    """

    def is_scheduled(self, hook: str) -> bool:
        """Check whether a hook has a pending schedule."""
        ...

    def schedule(self, hook: str, interval: float) -> bool:
        """Register a hook to fire every ``interval`` seconds.

        Returns:
            True if the schedule was registered.
        """
        ...

    def unschedule(self, hook: str) -> None:
        """Remove any schedule for a hook."""
        ...

    def next_run(self, hook: str) -> datetime | None:
        """Return when the hook fires next, or None if unscheduled."""
        ...
