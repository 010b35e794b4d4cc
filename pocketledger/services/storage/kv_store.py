"""
Key-Value Store Implementations

InMemoryStore is used by tests and as a throwaway store.

JsonFileStore keeps every key in one JSON object on disk - the local
equivalent of the browser's localStorage.

TRADEOFFS:
- The whole file is rewritten on every set (fine: a few hundred KB at most)
- Writes go to a temp file first and are swapped in with os.replace, so a
  crash mid-write never leaves a truncated store behind
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pocketledger.audit import get_logger
from pocketledger.services.storage.interface import KeyValueStore, StorageError


logger = get_logger(__name__)


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Single-file JSON store.

    A missing file is an empty store. An unreadable file is logged and
    treated as empty so the app still starts; the broken file is left in
    place until the next successful write replaces it.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._data = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("store_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("store_malformed", path=str(self._path))
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self._path.parent),
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write store {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        self._write()
        return True

    def keys(self) -> list[str]:
        return list(self._data)
