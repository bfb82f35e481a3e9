"""Tests for InMemoryOptionStore."""

import pytest

from edgepurge.infrastructure.backends.memory import InMemoryOptionStore


class TestInMemoryOptionStore:
    """Tests for InMemoryOptionStore."""

    @pytest.fixture
    def store(self) -> InMemoryOptionStore:
        """Create a store for testing."""
        return InMemoryOptionStore()

    @pytest.mark.asyncio
    async def test_set_and_get(self, store: InMemoryOptionStore) -> None:
        """Test basic set and get operations."""
        await store.set("edgepurge:queue", b"[]")
        result = await store.get("edgepurge:queue")
        assert result == b"[]"

    @pytest.mark.asyncio
    async def test_get_missing_key(self, store: InMemoryOptionStore) -> None:
        """Test getting a missing slot returns None."""
        result = await store.get("nonexistent")
        assert result is None

    @pytest.mark.asyncio
    async def test_set_overwrites(self, store: InMemoryOptionStore) -> None:
        """Test that set replaces the whole slot."""
        await store.set("slot", b"one")
        await store.set("slot", b"two")

        assert await store.get("slot") == b"two"
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryOptionStore) -> None:
        """Test deleting a slot."""
        await store.set("slot", b"value")

        # Delete existing slot
        deleted = await store.delete("slot")
        assert deleted is True

        # Verify deleted
        result = await store.get("slot")
        assert result is None

        # Delete non-existing slot
        deleted = await store.delete("slot")
        assert deleted is False

    @pytest.mark.asyncio
    async def test_initial_slots(self) -> None:
        """Test seeding the store."""
        store = InMemoryOptionStore({"a": b"1", "b": b"2"})

        assert await store.get("a") == b"1"
        assert sorted(store.keys()) == ["a", "b"]
