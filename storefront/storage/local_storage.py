# storefront/storage/local_storage.py

"""Key-value persistence backends for the cart and wishlist stores."""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.storage")

_SAFE_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """String key-value store with JSON list helpers on top."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the raw stored value, or ``None`` when absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*; no-op when absent."""
        ...

    def load_records(self, key: str) -> list[dict[str, Any]]:
        """Load a persisted JSON list of records.

        Missing keys, unreadable data and non-list payloads all yield an
        empty list. Non-dict entries are dropped.
        """
        try:
            raw = self.get_item(key)
        except OSError as exc:
            logger.error(
                "Failed to read '%s': %s", key, exc, exc_info=True
            )
            return []
        if raw is None:
            return []

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(
                "Corrupt data under '%s', starting empty: %s",
                key,
                exc,
                exc_info=True,
            )
            return []

        if not isinstance(data, list):
            logger.error(
                "Expected a list under '%s', got %s",
                key,
                type(data).__name__,
            )
            return []

        records = [r for r in data if isinstance(r, dict)]
        if len(records) != len(data):
            logger.warning(
                "Dropped %d non-record entries under '%s'",
                len(data) - len(records),
                key,
            )
        return records

    def save_records(
        self, key: str, records: list[dict[str, Any]]
    ) -> None:
        """Persist a list of records as one JSON document."""
        self.set_item(key, json.dumps(records, ensure_ascii=False))
        logger.debug("Saved %d records under '%s'", len(records), key)


class MemoryStorage(KeyValueStorage):
    """Process-local storage, used by tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """Stores each key as ``<directory>/<key>.json`` on disk."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory: Path = directory or Settings.STORAGE_DIR
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "JsonFileStorage initialised, directory=%s", self.directory
        )

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        # Temp file then atomic replace
        tmp_path = path.with_name(f"{path.name}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            logger.debug("Removed '%s' (%s)", key, path)
