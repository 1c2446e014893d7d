"""Mini README: Key-value stores holding the session snapshot.

Structure:
    * KeyValueStore - protocol the session persists through.
    * MemoryStore - dictionary-backed store for tests and ephemeral sessions.
    * JsonDirectoryStore - one ``<key>.json`` file per key on disk.

Stores only move strings; encoding the record is the session's job. Writes
to disk go through a temporary file and ``replace`` so a crash mid-write
never leaves a half-written snapshot behind.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Keep snapshots in a dictionary for the lifetime of the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonDirectoryStore:
    """Persist each key as a JSON document inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("Snapshot directory set to %s", self.directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        temporary = path.with_suffix(".json.tmp")
        temporary.write_text(value, encoding="utf-8")
        temporary.replace(path)
        LOGGER.debug("Wrote %s bytes to %s", len(value), path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            LOGGER.info("Deleted snapshot %s", path)
