"""Purge configuration entity."""

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any

DEFAULT_BATCH_SIZE = 30
MIN_BATCH_SIZE = 1
DEFAULT_QUEUE_MAX_SIZE = 1000


@dataclass
class PurgeConfig:
    """Purge configuration.

    Holds the CDN credentials and the knobs of the invalidation loop.
    Instances built from user input should go through ``sanitize_settings``
    so invalid values are reported instead of silently persisted.

    Queue draining:
        Every ``drain_interval`` the drainer takes up to ``batch_size`` items
        from the queue. Values below ``MIN_BATCH_SIZE`` are coerced upward
        by the drainer rather than rejected.
    """

    zone_id: str = ""
    api_token: str = ""
    batch_size: int = DEFAULT_BATCH_SIZE
    debug_mode: bool = False

    # Queue
    queue_max_size: int | None = DEFAULT_QUEUE_MAX_SIZE
    drain_interval: timedelta | None = None

    # HTTP timeouts in seconds
    purge_timeout: float = 30.0
    connection_timeout: float = 15.0

    # Enqueue high-priority items whose inline purge failed
    requeue_failed_high_priority: bool = True

    key_prefix: str = "edgepurge"

    def __post_init__(self) -> None:
        """Set default drain interval if not provided."""
        if self.drain_interval is None:
            self.drain_interval = timedelta(seconds=60)

    @property
    def has_credentials(self) -> bool:
        """Check whether both zone id and API token are set."""
        return bool(self.zone_id and self.api_token)

    @property
    def effective_batch_size(self) -> int:
        """Return the batch size, never lower than ``MIN_BATCH_SIZE``.

        A value that is not a number falls back to ``DEFAULT_BATCH_SIZE``.
        """
        try:
            return max(MIN_BATCH_SIZE, int(self.batch_size))
        except (TypeError, ValueError):
            return DEFAULT_BATCH_SIZE

    def to_dict(self) -> dict[str, Any]:
        """Return the representation stored in the settings slot."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, timedelta):
                value = value.total_seconds()
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PurgeConfig":
        """Build a config from a stored settings mapping.

        Unknown keys are ignored so older or newer settings payloads load.
        Values of the wrong type are coerced: credentials to text, and a
        batch size or drain interval that is not a positive number to its
        default.

        Args:
            data: Mapping as produced by ``to_dict``.

        Returns:
            A new PurgeConfig instance.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for name in ("zone_id", "api_token"):
            if name in values:
                values[name] = str(values[name] or "")
        if "batch_size" in values:
            values["batch_size"] = _as_batch_size(values["batch_size"])
        values["drain_interval"] = _as_interval(values.get("drain_interval"))
        return cls(**values)


def _as_batch_size(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_BATCH_SIZE
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_BATCH_SIZE


def _as_interval(value: Any) -> timedelta | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    try:
        return timedelta(seconds=value)
    except (ValueError, OverflowError):
        return None
