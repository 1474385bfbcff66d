"""In-memory key-value store, used by tests."""

import json
from typing import Any, Optional

from expense_tracker.services.storage.interface import KeyValueStore, SerializationError


class InMemoryStore(KeyValueStore):
    """
    Dict-backed store.

    Values are kept as JSON text so callers see the same
    serialization behavior they would get from a file.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Value for '{key}' is not JSON serializable: {e}") from e

    def raw(self, key: str) -> Optional[str]:
        """The stored JSON text for a key, for inspecting what was written."""
        return self._data.get(key)
