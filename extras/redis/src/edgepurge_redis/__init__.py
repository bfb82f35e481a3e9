"""Redis option store for edgepurge."""

from edgepurge_redis.backend import RedisOptionStore

__all__ = ["RedisOptionStore"]
