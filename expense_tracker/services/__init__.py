"""Services package."""

from expense_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    SerializationError,
    StorageError,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "SerializationError",
    "StorageError",
]
