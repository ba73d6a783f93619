"""
Compiled-fact cache.

Maps the exact declaration text to the request field names it was
compiled with. Populated by the compiler, read by the evaluator.
Entries are only ever added or overwritten, never removed.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path

from apidecl.core.errors import DeclarationNotCompiledError, SetupError

logger = logging.getLogger(__name__)

CACHE_MISS_MESSAGE = (
    "No compilation found for the declaration. Compile the declarations "
    "before evaluating them. Did you forget to call load_all in your entrypoint?"
)


class CompiledFactCache:
    """Thread-safe store of declaration -> request field names."""

    def __init__(self, entries: Mapping[str, Sequence[str]] | None = None):
        self._entries: dict[str, list[str]] = {}
        self._lock = threading.RLock()
        for declaration, keys in (entries or {}).items():
            self._entries[declaration] = list(keys)

    def store(self, declaration: str, req_data_keys: Sequence[str]) -> None:
        """Record a compiled declaration, replacing any earlier entry."""
        with self._lock:
            self._entries[declaration] = list(req_data_keys)

    def lookup(self, declaration: str) -> list[str]:
        """
        Get the request field names a declaration was compiled with.

        Raises:
            DeclarationNotCompiledError: If the declaration was never compiled.
        """
        with self._lock:
            keys = self._entries.get(declaration)
        if keys is None:
            raise DeclarationNotCompiledError(CACHE_MISS_MESSAGE)
        return list(keys)

    def __contains__(self, declaration: object) -> bool:
        with self._lock:
            return declaration in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def to_dict(self) -> dict[str, list[str]]:
        """Snapshot of all entries."""
        with self._lock:
            return {decl: list(keys) for decl, keys in self._entries.items()}

    def save(self, path: Path) -> None:
        """
        Write the cache as a JSON object of declaration -> field names.

        Args:
            path: Target file; parent directories are created
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, sort_keys=True)
        logger.debug("Saved %d compiled declarations to %s", len(self), path)

    @classmethod
    def load(cls, path: Path) -> CompiledFactCache:
        """
        Load a cache written by :meth:`save`.

        Raises:
            SetupError: If the file is missing or not a valid cache
        """
        if not path.exists():
            raise SetupError(f"No compiled fact cache found at {path}. Run 'apidecl compile' first.")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SetupError(f"Invalid compiled fact cache at {path}: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(keys, list) for keys in data.values()
        ):
            raise SetupError(f"Invalid compiled fact cache at {path}: expected an object of lists")

        logger.debug("Loaded %d compiled declarations from %s", len(data), path)
        return cls(data)
