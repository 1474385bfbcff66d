"""
JSON File Storage Implementation

DESIGN DECISION: Every key lives in one JSON object in one file, the
way browser local storage keeps every key for an origin together.

TRADEOFFS:
- The whole file is rewritten on every set (fine for personal volumes)
- No locking (single user, single process)
- A corrupt file reads as empty rather than blocking the app

Writes go to a sibling temp file first and are moved into place with
os.replace, so a crash mid-write leaves the previous contents intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.config import get_settings
from expense_tracker.services.storage.interface import (
    KeyValueStore,
    SerializationError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """Key-value store backed by a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            path: File to read and write.
                  Defaults to the configured storage path.
        """
        self._path = Path(path) if path is not None else get_settings().storage.path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Value for '{key}' is not JSON serializable: {e}") from e

        data = self._read_all()
        data[key] = json.loads(encoded)

        try:
            self._write_all(data)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def _read_all(self) -> dict[str, Any]:
        """Load the whole document, falling back to empty on any problem."""
        if not self._path.exists():
            return {}

        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("storage_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "storage_unexpected_shape",
                path=str(self._path),
                found=type(data).__name__,
            )
            return {}

        return data

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
