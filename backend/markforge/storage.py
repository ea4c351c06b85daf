"""Key-value stores backing the dedup registry.

The registry only needs ``get/set/remove`` on string keys and string values.
Hosts pick the medium: an in-memory dict for tests and previews, a directory
of JSON files on a server, or ``UnavailableKeyValueStore`` where nothing may
be persisted.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = Path(__file__).parent / "data"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """One ``<key>.json`` file per key under ``data_dir``.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so readers see either the old or the new document.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir or _DEFAULT_DATA_DIR

    def _path(self, key: str) -> Path:
        # Percent-encoding keeps distinct keys in distinct files.
        return self.data_dir / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class UnavailableKeyValueStore:
    """A host with no persistent storage: every operation fails."""

    def get(self, key: str) -> str | None:
        raise OSError("persistent storage is unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("persistent storage is unavailable")

    def remove(self, key: str) -> None:
        raise OSError("persistent storage is unavailable")
