"""
Storage Services Package

Provides the key-value store interface and its implementations.
The JSON file store is used by the app; the in-memory store by tests.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStore,
    SerializationError,
    StorageError,
)
from expense_tracker.services.storage.json_file import JsonFileStore
from expense_tracker.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "SerializationError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
