"""In-memory option store implementation."""


class InMemoryOptionStore:
    """Option store keeping slots in a process-local dict.

    Suitable for tests and single-process deployments where losing the
    queue on restart is acceptable. Use the Redis store otherwise.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional slots to start with.
        """
        self._slots: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        """Retrieve the value stored in a slot."""
        return self._slots.get(key)

    async def set(self, key: str, value: bytes) -> None:
        """Overwrite a slot."""
        self._slots[key] = value

    async def delete(self, key: str) -> bool:
        """Empty a slot.

        Returns:
            True if the slot held a value, False otherwise.
        """
        return self._slots.pop(key, None) is not None

    def keys(self) -> list[str]:
        """Return the names of non-empty slots."""
        return list(self._slots)

    def __len__(self) -> int:
        """Return the number of non-empty slots."""
        return len(self._slots)
