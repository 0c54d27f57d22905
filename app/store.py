"""Single-slot, file-backed store for the last accepted webhook payload.

The file holds exactly one JSON document: the resource of the most recent
event. Writes are full overwrites with no locking, so a deployment must keep
a single writer process (one uvicorn worker).
"""

import json
import logging
from pathlib import Path
from typing import Any

from app.errors import PersistError, PersistErrorKind

logger = logging.getLogger(__name__)


def _is_empty(data: Any) -> bool:
    if data is None:
        return True
    if isinstance(data, (str, bytes, list, tuple, dict)):
        return len(data) == 0
    return False


class LastEventStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, data: Any) -> Any:
        """Overwrite the slot with ``data`` and return the content read back from disk."""
        if _is_empty(data):
            raise PersistError(PersistErrorKind.EMPTY_DATA, "No data provided to write to file")

        try:
            serialized = json.dumps(data, indent=2, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise PersistError(PersistErrorKind.INVALID_DATA, f"Data is not JSON-serializable: {e}")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(serialized, encoding="utf-8")
            written = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistError(PersistErrorKind.WRITE_FAILED, f"Could not write {self.path}: {e}")

        try:
            stored = json.loads(written)
        except ValueError as e:
            raise PersistError(PersistErrorKind.WRITE_FAILED, f"Read-back of {self.path} is not valid JSON: {e}")
        if stored != json.loads(serialized):
            raise PersistError(PersistErrorKind.WRITE_FAILED, f"Read-back of {self.path} does not match written data")

        logger.info(f"Data written to file: {self.path}")
        return stored

    def load(self) -> Any | None:
        """Return the stored payload, or None before the first save."""
        if not self.path.exists():
            logger.info(f"No last webhook recorded yet ({self.path} does not exist)")
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistError(PersistErrorKind.CORRUPT, f"Could not read {self.path}: {e}")
        try:
            return json.loads(raw)
        except ValueError as e:
            raise PersistError(PersistErrorKind.CORRUPT, f"{self.path} does not contain valid JSON: {e}")
