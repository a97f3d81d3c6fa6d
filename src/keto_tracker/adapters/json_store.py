"""Local key-value persistence backed by a JSON file."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for simple JSON-compatible key-value storage."""

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-compatible value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class JsonFileStore(KeyValueStore):
    """Key-value store persisted as a single JSON document."""

    path: Path

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value and flush the document to disk."""
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        """Remove a key and flush the document to disk."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as handle:
            return json.load(handle)

    def _dump(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)
