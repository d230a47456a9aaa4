"""File-backed state repository storing one JSON document per key."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from crewdesk.services.state import StateRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStateRepository(StateRepository):
    """Writes ``<directory>/<key>.json``, replacing the file atomically."""

    directory: Path

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self, key: str) -> object | None:
        """Return the decoded document, or None when absent or unreadable."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_bytes())
        except ValueError:
            _logger.exception("Ignoring unreadable state file %s", path)
            return None

    def save(self, key: str, value: object) -> None:
        """Serialise the whole value and swap it into place."""
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(value), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        """Remove the document for a key."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"
