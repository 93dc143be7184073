"""Key-value stores for persisted progression."""

import json
import os
from pathlib import Path

from ..exceptions import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)


class MemoryStore:
    """Keeps values for the lifetime of the process only."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    Stores string values in a single JSON object on disk.

    The file is read once on first access. Every set() rewrites the whole
    file through a temporary sibling so a crash never leaves it half
    written. A missing file is an empty store; a corrupt one is logged and
    treated as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        self._data = {}
        if not self.path.exists():
            logger.debug(f"No progression file at {self.path}")
            return self._data

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable progression file {self.path}: {e}")
            return self._data

        if isinstance(raw, dict):
            self._data = {str(k): v for k, v in raw.items() if v is not None}
        else:
            logger.warning(f"Ignoring progression file {self.path}: not an object")
        return self._data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(str(self.path), str(e)) from e
