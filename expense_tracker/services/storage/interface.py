"""
Abstract Storage Interface

DESIGN DECISION: The tracker talks to storage through a tiny key-value
interface, the same shape as browser local storage. This allows us to:
1. Keep everything in one JSON file on disk for real use
2. Use in-memory storage for testing
3. Keep the tracker decoupled from where bytes end up

The interface is intentionally minimal: get and set, JSON values only,
no versioning, no transactions.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """
    Abstract interface for a synchronous JSON key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Read and deserialize the value stored under a key.

        Args:
            key: The storage key
            default: Returned when the key is absent or unreadable

        Returns:
            The deserialized value, or default
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Serialize a value and store it under a key, replacing any prior value.

        Args:
            key: The storage key
            value: Any JSON-serializable value

        Raises:
            SerializationError: If the value cannot be encoded as JSON
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SerializationError(StorageError):
    """Value could not be encoded as JSON."""
    pass
