"""
Local key-value storage for viewer state.

Emulates browser local storage with a JSON file: string keys mapping to
JSON-encoded string values, read on startup and rewritten on every set.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .grid import COLUMN_WIDTHS_KEY

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    JSON-file backed key-value store.

    A missing or unreadable file behaves as empty storage.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize the storage.

        Args:
            path: JSON file holding the stored items
        """
        self.path = Path(path)

    def _read_items(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open() as file:
                items = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        return items if isinstance(items, dict) else {}

    def get_item(self, key: str) -> str | None:
        """
        Get the raw stored string for a key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if absent
        """
        return self._read_items().get(key)

    def set_item(self, key: str, value: str) -> None:
        """
        Store a string under a key, persisting the file.

        Args:
            key: Storage key
            value: String to store
        """
        items = self._read_items()
        items[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w') as file:
            json.dump(items, file, indent=2)

    def get_json(self, key: str, default: Any) -> Any:
        """Decode the JSON stored under a key, or return default if unset."""
        value = self.get_item(key)
        if not value or not isinstance(value, str):
            return default
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring invalid JSON under {key}: {e}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))


class ColumnWidthStore:
    """Persists grid column widths under a fixed storage key."""

    def __init__(self, storage: LocalStorage, key: str = COLUMN_WIDTHS_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[int | None]:
        """Stored widths, empty when nothing was saved yet."""
        widths = self.storage.get_json(self.key, [])
        return widths if isinstance(widths, list) else []

    def save(self, widths: list[int | None]) -> None:
        logger.debug(f"Saving column widths: {widths}")
        self.storage.set_json(self.key, widths)
