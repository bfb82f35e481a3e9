"""Tests for AdminService."""

import logging

import pytest
from conftest import FakePurgeClient, FakeTimer, make_items

from edgepurge.core.entities import ConnectionResult, PurgeConfig
from edgepurge.core.services.admin import (
    AdminService,
    CheckConnection,
    ClearQueue,
    ForceProcess,
    SaveSettings,
    Status,
)
from edgepurge.core.services.batch_drainer import DRAIN_HOOK, BatchDrainer
from edgepurge.core.services.invalidation_queue import InvalidationQueue
from edgepurge.core.services.settings import SettingsRepository
from edgepurge.infrastructure.backends.memory import InMemoryOptionStore


class FakeConnectionTester:
    """Connection tester returning a fixed result."""

    def __init__(self, success: bool = True) -> None:
        self.success = success
        self.calls: list[tuple[str | None, str | None, bool]] = []

    async def test_connection(
        self,
        zone_id: str | None = None,
        api_token: str | None = None,
        use_cache: bool = True,
    ) -> ConnectionResult:
        self.calls.append((zone_id, api_token, use_cache))
        if self.success:
            return ConnectionResult(
                success=True,
                message="Connected to zone: example.com (Plan: Free)",
                zone_name="example.com",
                plan_name="Free",
            )
        return ConnectionResult(
            success=False,
            message="HTTP code: 403, API code: 10000, Message: Authentication error",
        )


@pytest.fixture
def tester() -> FakeConnectionTester:
    return FakeConnectionTester()


@pytest.fixture
def settings(store: InMemoryOptionStore) -> SettingsRepository:
    return SettingsRepository(store)


@pytest.fixture
def drainer(
    queue: InvalidationQueue,
    purge_client: FakePurgeClient,
    timer: FakeTimer,
    config: PurgeConfig,
) -> BatchDrainer:
    return BatchDrainer(queue, purge_client, timer, config=config)


@pytest.fixture
def admin(
    config: PurgeConfig,
    queue: InvalidationQueue,
    drainer: BatchDrainer,
    tester: FakeConnectionTester,
    settings: SettingsRepository,
) -> AdminService:
    return AdminService(config, queue, drainer, tester, settings)


@pytest.fixture(autouse=True)
def restore_package_log_level():
    """Keep debug-mode changes from leaking between tests."""
    package_logger = logging.getLogger("edgepurge")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


class TestAdminService:
    """Tests for AdminService."""

    @pytest.mark.asyncio
    async def test_clear_queue(
        self, admin: AdminService, queue: InvalidationQueue
    ) -> None:
        """Test emptying the queue."""
        await queue.enqueue(make_items(5))

        result = await admin.dispatch(ClearQueue())

        assert result.message == "queue_cleared"
        assert result.success
        assert await queue.size() == 0

    @pytest.mark.asyncio
    async def test_test_connection_success(
        self,
        admin: AdminService,
        tester: FakeConnectionTester,
        settings: SettingsRepository,
    ) -> None:
        """Test a successful connectivity check is reported and stored."""
        result = await admin.dispatch(CheckConnection())

        assert result.message == "connection_success"
        assert result.success
        assert "example.com" in result.details
        assert tester.calls == [("zone123", "token123", False)]
        status = await settings.load_connection_status()
        assert status is not None
        assert status["success"] is True

    @pytest.mark.asyncio
    async def test_test_connection_error(
        self, admin: AdminService, tester: FakeConnectionTester
    ) -> None:
        """Test a failed connectivity check."""
        tester.success = False

        result = await admin.dispatch(CheckConnection())

        assert result.message == "connection_error"
        assert not result.success
        assert "403" in result.details

    @pytest.mark.asyncio
    async def test_test_connection_missing_credentials(
        self,
        admin: AdminService,
        config: PurgeConfig,
        tester: FakeConnectionTester,
    ) -> None:
        """Test that no request is made without credentials."""
        config.api_token = ""

        result = await admin.dispatch(CheckConnection())

        assert result.message == "missing_credentials"
        assert not result.success
        assert tester.calls == []

    @pytest.mark.asyncio
    async def test_force_process(
        self,
        admin: AdminService,
        queue: InvalidationQueue,
        timer: FakeTimer,
    ) -> None:
        """Test running the drainer on demand."""
        await queue.enqueue(make_items(40))

        result = await admin.dispatch(ForceProcess())

        assert result.message == "cron_executed"
        assert result.success
        assert result.payload == {"status": "purged", "remaining": 10}
        assert timer.is_scheduled(DRAIN_HOOK)

    @pytest.mark.asyncio
    async def test_save_settings_updates_shared_config(
        self,
        admin: AdminService,
        config: PurgeConfig,
        tester: FakeConnectionTester,
        settings: SettingsRepository,
    ) -> None:
        """Test that saved values apply to the shared config in place."""
        result = await admin.dispatch(
            SaveSettings(
                {
                    "zone_id": "zone123",
                    "api_token": "token123",
                    "batch_size": "10",
                    "debug_mode": "1",
                }
            )
        )

        assert result.message == "settings_saved"
        assert result.success
        assert config.batch_size == 10
        assert config.debug_mode is True
        assert logging.getLogger("edgepurge").level == logging.DEBUG
        stored = await settings.load()
        assert stored is not None
        assert stored.batch_size == 10
        # Unchanged credentials are not re-tested
        assert tester.calls == []

    @pytest.mark.asyncio
    async def test_save_settings_invalid_batch_size(
        self, admin: AdminService, config: PurgeConfig
    ) -> None:
        """Test that an invalid batch size is reset and reported."""
        result = await admin.dispatch(
            SaveSettings({"zone_id": "zone123", "api_token": "token123", "batch_size": "0"})
        )

        assert not result.success
        assert config.batch_size == 30
        assert result.payload["errors"][0]["code"] == "invalid_batch_size"

    @pytest.mark.asyncio
    async def test_save_settings_tests_new_credentials(
        self,
        admin: AdminService,
        config: PurgeConfig,
        tester: FakeConnectionTester,
    ) -> None:
        """Test that changed credentials trigger a connectivity check."""
        result = await admin.dispatch(
            SaveSettings({"zone_id": "zone456", "api_token": "token456"})
        )

        assert result.success
        assert config.zone_id == "zone456"
        assert tester.calls == [("zone456", "token456", False)]
        assert result.payload["connection"]["zone_name"] == "example.com"

    @pytest.mark.asyncio
    async def test_status(
        self,
        admin: AdminService,
        queue: InvalidationQueue,
        timer: FakeTimer,
    ) -> None:
        """Test the status view self-heals the timer and lists queued items."""
        await queue.enqueue(make_items(5))

        result = await admin.dispatch(Status(max_items=2))

        assert result.message == "status"
        assert result.success
        assert timer.is_scheduled(DRAIN_HOOK)
        assert result.payload["pending"] == 5
        assert result.payload["queued"] == [
            "file:https://example.com/page/0/",
            "file:https://example.com/page/1/",
        ]
        assert result.payload["next_run"] is not None
        assert result.payload["last_run"] is None
        assert result.payload["connection"] is None

    @pytest.mark.asyncio
    async def test_status_after_run(self, admin: AdminService) -> None:
        """Test that the last drain result is reported."""
        await admin.dispatch(ForceProcess())

        result = await admin.dispatch(Status())

        assert result.payload["last_run"]["status"] == "empty"
