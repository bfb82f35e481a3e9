"""Settings validation and persistence."""

import logging
from dataclasses import dataclass, field, fields
from typing import Any

from edgepurge.core.entities.purge_config import (
    DEFAULT_BATCH_SIZE,
    MIN_BATCH_SIZE,
    PurgeConfig,
)
from edgepurge.core.interfaces.option_store import IOptionStore
from edgepurge.core.interfaces.serializer import ISerializer
from edgepurge.infrastructure.serializers.json import (
    JsonSerializer,
    SerializationError,
)

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
CONNECTION_STATUS_KEY = "connection_status"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SettingsError:
    """Non-fatal validation problem reported back to the settings form."""

    code: str
    message: str
    field: str | None = None


@dataclass
class SettingsResult:
    """Outcome of sanitizing submitted settings."""

    config: PurgeConfig
    errors: list[SettingsError] = field(default_factory=list)
    credentials_changed: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors


def sanitize_settings(
    raw: dict[str, Any],
    previous: PurgeConfig | None = None,
) -> SettingsResult:
    """Validate submitted settings into a typed config.

    Text fields are stripped. Credentials travel in the request URL and
    the Authorization header, so a value with non-ASCII characters or inner
    whitespace keeps the previous value and is reported. A batch size that
    is not a number or is below the minimum is reset to the default and
    reported as a non-fatal error.
    ``debug_mode`` follows checkbox semantics: absent means off. Fields not
    exposed in the form keep their previous values.

    Args:
        raw: Submitted form values.
        previous: The currently stored config.

    Returns:
        The sanitized config with any validation errors.
    """
    previous = previous or PurgeConfig()
    errors: list[SettingsError] = []

    zone_id = _credential(raw, "zone_id", "Zone ID", previous.zone_id, errors)
    api_token = _credential(raw, "api_token", "API token", previous.api_token, errors)

    batch_size: int
    try:
        batch_size = int(raw.get("batch_size", DEFAULT_BATCH_SIZE))
    except (TypeError, ValueError):
        batch_size = MIN_BATCH_SIZE - 1
    if batch_size < MIN_BATCH_SIZE:
        batch_size = DEFAULT_BATCH_SIZE
        errors.append(
            SettingsError(
                code="invalid_batch_size",
                message=(
                    f"Batch size must be at least {MIN_BATCH_SIZE}. "
                    f"Reset to default ({DEFAULT_BATCH_SIZE})."
                ),
                field="batch_size",
            )
        )

    debug_mode = _as_bool(raw.get("debug_mode"))

    values = {f.name: getattr(previous, f.name) for f in fields(previous)}
    values.update(
        zone_id=zone_id,
        api_token=api_token,
        batch_size=batch_size,
        debug_mode=debug_mode,
    )
    config = PurgeConfig(**values)

    credentials_changed = (
        zone_id != previous.zone_id or api_token != previous.api_token
    )
    return SettingsResult(
        config=config,
        errors=errors,
        credentials_changed=credentials_changed,
    )


def _credential(
    raw: dict[str, Any],
    name: str,
    label: str,
    previous: str,
    errors: list[SettingsError],
) -> str:
    value = str(raw.get(name) or "").strip()
    if value.isascii() and not any(c.isspace() for c in value):
        return value
    errors.append(
        SettingsError(
            code=f"invalid_{name}",
            message=f"{label} may only contain ASCII characters without spaces.",
            field=name,
        )
    )
    return previous


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


class SettingsRepository:
    """Loads and saves the settings and connection status slots."""

    def __init__(
        self,
        store: IOptionStore,
        serializer: ISerializer | None = None,
        key_prefix: str = "edgepurge",
    ) -> None:
        self._store = store
        self._serializer = serializer or JsonSerializer()
        self._settings_key = f"{key_prefix}:{SETTINGS_KEY}"
        self._status_key = f"{key_prefix}:{CONNECTION_STATUS_KEY}"

    async def load(self) -> PurgeConfig | None:
        """Return the stored config, or None if nothing usable is stored."""
        data = await self._read(self._settings_key)
        if not isinstance(data, dict):
            return None
        try:
            return PurgeConfig.from_dict(data)
        except TypeError as e:
            logger.error("Ignoring invalid stored settings: %s", e)
            return None

    async def save(self, config: PurgeConfig) -> None:
        await self._store.set(
            self._settings_key, self._serializer.serialize(config.to_dict())
        )

    async def load_connection_status(self) -> dict[str, Any] | None:
        """Return the last recorded connectivity check, if any."""
        data = await self._read(self._status_key)
        return data if isinstance(data, dict) else None

    async def save_connection_status(self, status: dict[str, Any]) -> None:
        await self._store.set(self._status_key, self._serializer.serialize(status))

    async def _read(self, key: str) -> Any:
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            return self._serializer.deserialize(raw)
        except SerializationError as e:
            logger.error("Ignoring unreadable slot %s: %s", key, e)
            return None
