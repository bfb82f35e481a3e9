"""Connectivity check result entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class ConnectionResult:
    """Outcome of a CDN zone connectivity check.

    Only used while configuring credentials; the purge flow never depends
    on it.
    """

    success: bool
    message: str
    zone_name: str | None = None
    plan_name: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Return the representation kept in the connection status slot."""
        return {
            "success": self.success,
            "message": self.message,
            "zone_name": self.zone_name,
            "plan_name": self.plan_name,
            "checked_at": self.checked_at.isoformat(),
        }
