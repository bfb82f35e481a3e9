"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for encoding values kept in option store slots."""

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        ...
