"""Redis option store implementation."""

import redis.asyncio as redis

from edgepurge.core.interfaces.option_store import StoreError


class RedisOptionStore:
    """Redis option store for multi-process and distributed deployments.

    Slots are plain Redis strings without expiry, so the queue survives
    restarts. Connection and command errors are raised as ``StoreError``.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis option store.

        Args:
            redis_url: Redis connection URL. Ignored if ``client`` is given.
            key_prefix: Optional namespace prepended to every slot name.
            client: Existing Redis client to use.
        """
        self._redis: redis.Redis = client or redis.from_url(redis_url)  # type: ignore
        self._key_prefix = key_prefix

    async def get(self, key: str) -> bytes | None:
        """Retrieve the value stored in a slot.

        Args:
            key: The slot name.

        Returns:
            The stored bytes, or None if the slot is empty.
        """
        try:
            return await self._redis.get(self._prefixed_key(key))
        except redis.RedisError as e:
            raise StoreError(f"Redis get failed for {key}: {e}") from e

    async def set(self, key: str, value: bytes) -> None:
        """Overwrite a slot.

        Args:
            key: The slot name.
            value: The value to store as bytes.
        """
        try:
            await self._redis.set(self._prefixed_key(key), value)
        except redis.RedisError as e:
            raise StoreError(f"Redis set failed for {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        """Empty a slot.

        Args:
            key: The slot name.

        Returns:
            True if the slot held a value, False otherwise.
        """
        try:
            result = await self._redis.delete(self._prefixed_key(key))
        except redis.RedisError as e:
            raise StoreError(f"Redis delete failed for {key}: {e}") from e
        return result > 0

    def _prefixed_key(self, key: str) -> str:
        if not self._key_prefix or key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisOptionStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
