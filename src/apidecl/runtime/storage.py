"""
Local storage collaborators for Local/get-in and Local/set-in.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Key/value store used by Local/* declarations."""

    def store(self, key: str, data: Mapping[str, Any]) -> None: ...

    def retrieve(self, key: str) -> Any: ...


class InMemoryStorage:
    """Process-local storage. Missing keys read as None."""

    def __init__(self) -> None:
        self._data: dict[str, Mapping[str, Any]] = {}
        self._lock = threading.Lock()

    def store(self, key: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            self._data[key] = data

    def retrieve(self, key: str) -> Any:
        with self._lock:
            return self._data.get(key)


class JsonFileStorage:
    """
    Storage that keeps one JSON file per key under a directory.

    Keys are percent-encoded into file names, so any key is safe to use.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _get_path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}.json"

    def store(self, key: str, data: Mapping[str, Any]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._get_path(key)
        with path.open("w", encoding="utf-8") as f:
            json.dump(dict(data), f, indent=2)
        logger.debug("Stored %s at %s", key, path)

    def retrieve(self, key: str) -> Any:
        path = self._get_path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
