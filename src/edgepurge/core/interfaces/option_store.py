"""Option store interface."""

from typing import Protocol


class StoreError(Exception):
    """Raised by option stores when the backing storage is unavailable."""

    pass


class IOptionStore(Protocol):
    """Contract for the key-value slots holding settings and queue state.

    The store is a set of named slots, not a database: callers read a whole
    value, modify it, and write it back. Methods are async to support both
    in-process and networked stores.
    """

    async def get(self, key: str) -> bytes | None:
        """Retrieve the value stored in a slot.

        Args:
            key: The slot name.

        Returns:
            The stored bytes, or None if the slot is empty.

        Raises:
            StoreError: If the store cannot be reached.
        """
        ...

    async def set(self, key: str, value: bytes) -> None:
        """Overwrite a slot.

        Args:
            key: The slot name.
            value: The bytes to store.

        Raises:
            StoreError: If the store cannot be reached.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Empty a slot.

        Args:
            key: The slot name.

        Returns:
            True if the slot held a value, False otherwise.
        """
        ...
