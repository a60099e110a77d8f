"""
JSON file storage for health records.

The whole record list is one JSON array. `load()` reads it in full and
`save_all()` rewrites it in full through a temporary file that replaces the
original, so a crash mid-write never leaves a truncated file behind.
"""

import os
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from medis.domain.errors import StorageError
from medis.domain.models import HealthRecord

logger = structlog.get_logger(__name__)

_RECORDS = TypeAdapter(list[HealthRecord])


class JsonFileStorage:
    """`RecordStorage` backed by a single JSON file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.logger = logger.bind(component="json_file_storage", path=str(self.path))

    def load(self) -> list[HealthRecord]:
        """Read every record. A missing or empty file is an empty list."""
        if not self.path.exists():
            self.logger.info("storage_file_missing")
            return []

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            return _RECORDS.validate_json(raw)
        except ValidationError as e:
            self.logger.error("storage_file_corrupt", error_count=e.error_count())
            raise StorageError(f"Corrupt record file {self.path}: {e}") from e

    def save_all(self, records: list[HealthRecord]) -> None:
        """Overwrite the file with `records`."""
        payload = _RECORDS.dump_json(records, indent=2)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        self.logger.debug("storage_file_written", count=len(records), size_bytes=len(payload))
