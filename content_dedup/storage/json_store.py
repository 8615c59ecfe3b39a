"""
Flat-file JSON record store.

The file holds a single JSON document:
    {
        "generated_at": "2026-02-03T13:22:16.502000+00:00",
        "total": 2,
        "records": [{"fingerprint": "...", ...}, ...]
    }

A bare JSON list of records is accepted on load. Writes go to a temporary
file in the same directory and replace the target atomically.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import tempfile

from ..core.types import ProcessedRecord
from ..logging_utils import log_event
from .base import (
    RecordStore,
    StorageReadError,
    StorageWriteError,
    record_from_dict,
    record_to_dict,
)

logger = logging.getLogger(__name__)


class JsonRecordStore(RecordStore):
    """Stores every record of one content family in a single JSON file.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_all(self) -> dict[str, ProcessedRecord]:
        if not self.path.exists():
            log_event(logger, "No record file found, starting fresh", event="store_empty", path=str(self.path))
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, ValueError) as exc:
            raise StorageReadError(f"Failed to read {self.path}: {exc}") from exc

        if isinstance(payload, dict):
            raw_records = payload.get("records", [])
        else:
            raw_records = payload
        if not isinstance(raw_records, list):
            raise StorageReadError(f"Invalid record file {self.path}: 'records' is not a list")

        records: dict[str, ProcessedRecord] = {}
        for raw in raw_records:
            if not isinstance(raw, dict):
                continue
            record = record_from_dict(raw)
            if record is not None:
                records[record.fingerprint] = record

        log_event(logger, "Loaded processed records", event="store_load", path=str(self.path), total=len(records))
        return records

    def save_all(self, records: dict[str, ProcessedRecord]) -> None:
        payload = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total": len(records),
            "records": [record_to_dict(record) for record in records.values()],
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        except OSError as exc:
            raise StorageWriteError(f"Failed to write {self.path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StorageWriteError(f"Failed to write {self.path}: {exc}") from exc

        log_event(logger, "Saved processed records", event="store_save", path=str(self.path), total=len(records))
