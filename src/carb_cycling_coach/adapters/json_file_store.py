"""Key-value store persisted to a local JSON file."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from carb_cycling_coach.services.storage import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores all keys in one JSON object file.

    Reads raise on an unreadable file. Writes move such a file aside to
    ``<name>.corrupt`` and start a new one.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the value stored under a key."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Write a value and persist the file."""
        data = self._read_for_write()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Delete a key and persist the file."""
        data = self._read_for_write()
        if key in data:
            del data[key]
            self._write(data)

    @property
    def corrupt_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".corrupt")

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return raw

    def _read_for_write(self) -> dict[str, object]:
        try:
            return self._read()
        except ValueError:
            _logger.warning(
                "Unreadable store file moved aside: path=%s", self.corrupt_path
            )
            os.replace(self.path, self.corrupt_path)
            return {}

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)
