"""Admin actions - queue reset, connectivity check, manual drain, settings."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Protocol

from edgepurge.core.entities.connection_result import ConnectionResult
from edgepurge.core.entities.purge_config import PurgeConfig
from edgepurge.core.services.batch_drainer import BatchDrainer
from edgepurge.core.services.invalidation_queue import InvalidationQueue
from edgepurge.core.services.settings import SettingsRepository, sanitize_settings
from edgepurge.utils.logging_config import set_debug_mode

logger = logging.getLogger(__name__)


class IConnectionTester(Protocol):
    """Anything able to validate CDN credentials."""

    async def test_connection(
        self,
        zone_id: str | None = None,
        api_token: str | None = None,
        use_cache: bool = True,
    ) -> ConnectionResult:
        ...


class AdminAction(Enum):
    """Closed set of operator actions."""

    CLEAR_QUEUE = "clear_queue"
    TEST_CONNECTION = "test_connection"
    FORCE_PROCESS = "force_process"
    SAVE_SETTINGS = "save_settings"
    STATUS = "status"


@dataclass(frozen=True)
class ClearQueue:
    action: ClassVar[AdminAction] = AdminAction.CLEAR_QUEUE


@dataclass(frozen=True)
class CheckConnection:
    action: ClassVar[AdminAction] = AdminAction.TEST_CONNECTION
    # Skip the memoized result
    force: bool = True


@dataclass(frozen=True)
class ForceProcess:
    action: ClassVar[AdminAction] = AdminAction.FORCE_PROCESS


@dataclass(frozen=True)
class SaveSettings:
    action: ClassVar[AdminAction] = AdminAction.SAVE_SETTINGS
    values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Status:
    action: ClassVar[AdminAction] = AdminAction.STATUS
    max_items: int = 50


AdminCommand = ClearQueue | CheckConnection | ForceProcess | SaveSettings | Status


@dataclass
class AdminResult:
    """Outcome of an admin action.

    Attributes:
        message: Machine-readable notice code, e.g. ``queue_cleared``.
        success: Whether the notice is a success or an error.
        details: Human-readable details.
        payload: Extra data, e.g. the status view contents.
    """

    message: str
    success: bool = True
    details: str = ""
    payload: dict[str, Any] = field(default_factory=dict)


class AdminService:
    """Executes operator actions against the invalidation system.

    The service shares its ``PurgeConfig`` instance with the other
    components; saving settings updates that instance in place so every
    component sees the new values immediately.
    """

    def __init__(
        self,
        config: PurgeConfig,
        queue: InvalidationQueue,
        drainer: BatchDrainer,
        connection_tester: IConnectionTester,
        settings: SettingsRepository,
    ) -> None:
        self._config = config
        self._queue = queue
        self._drainer = drainer
        self._connection_tester = connection_tester
        self._settings = settings
        self._handlers: dict[AdminAction, Callable[[Any], Awaitable[AdminResult]]] = {
            AdminAction.CLEAR_QUEUE: self._clear_queue,
            AdminAction.TEST_CONNECTION: self._test_connection,
            AdminAction.FORCE_PROCESS: self._force_process,
            AdminAction.SAVE_SETTINGS: self._save_settings,
            AdminAction.STATUS: self._status,
        }

    async def dispatch(self, command: AdminCommand) -> AdminResult:
        """Run an admin action.

        Args:
            command: One of the action payload dataclasses.

        Returns:
            The notice to show the operator.
        """
        handler = self._handlers[command.action]
        return await handler(command)

    async def _clear_queue(self, command: ClearQueue) -> AdminResult:
        await self._queue.clear()
        logger.info("Invalidation queue cleared by admin")
        return AdminResult(message="queue_cleared")

    async def _test_connection(self, command: CheckConnection) -> AdminResult:
        if not self._config.has_credentials:
            return AdminResult(message="missing_credentials", success=False)
        return await self._check_connection(use_cache=not command.force)

    async def _force_process(self, command: ForceProcess) -> AdminResult:
        logger.debug("Manual execution of queue processing triggered from admin")
        result = await self._drainer.run()
        return AdminResult(
            message="cron_executed",
            success=result.succeeded,
            details=f"{result.status.value}: {result.batch_size} purged, "
                    f"{result.remaining} remaining",
            payload={"status": result.status.value, "remaining": result.remaining},
        )

    async def _save_settings(self, command: SaveSettings) -> AdminResult:
        result = sanitize_settings(command.values, previous=self._config)
        for f in fields(result.config):
            setattr(self._config, f.name, getattr(result.config, f.name))

        await self._settings.save(self._config)
        set_debug_mode(self._config.debug_mode)

        errors = [
            {"code": e.code, "message": e.message, "field": e.field}
            for e in result.errors
        ]
        payload: dict[str, Any] = {"errors": errors}

        if result.credentials_changed and self._config.has_credentials:
            connection = await self._check_connection(use_cache=False)
            payload["connection"] = connection.payload
            return AdminResult(
                message="settings_saved",
                success=connection.success and result.is_valid,
                details=connection.details,
                payload=payload,
            )

        return AdminResult(
            message="settings_saved",
            success=result.is_valid,
            details="; ".join(e.message for e in result.errors),
            payload=payload,
        )

    async def _status(self, command: Status) -> AdminResult:
        scheduled = self._drainer.ensure_scheduled()
        items = await self._queue.items()
        next_run = self._drainer.next_run()
        last = self._drainer.last_result

        payload: dict[str, Any] = {
            "pending": len(items),
            "queued": [str(item) for item in items[: max(0, command.max_items)]],
            "scheduled": scheduled,
            "next_run": next_run.isoformat() if next_run else None,
            "last_run": None,
            "connection": await self._settings.load_connection_status(),
        }
        if last is not None:
            payload["last_run"] = {
                "status": last.status.value,
                "started_at": last.started_at.isoformat(),
                "batch_size": last.batch_size,
                "remaining": last.remaining,
                "duration": round(last.duration, 4),
            }

        return AdminResult(message="status", success=scheduled, payload=payload)

    async def _check_connection(self, use_cache: bool) -> AdminResult:
        connection = await self._connection_tester.test_connection(
            self._config.zone_id,
            self._config.api_token,
            use_cache=use_cache,
        )
        await self._settings.save_connection_status(connection.to_dict())
        return AdminResult(
            message="connection_success" if connection.success else "connection_error",
            success=connection.success,
            details=connection.message,
            payload=connection.to_dict(),
        )
