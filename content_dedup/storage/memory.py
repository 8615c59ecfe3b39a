"""In-process record store, for memory-only mode and tests."""

from __future__ import annotations

import copy

from ..core.types import ProcessedRecord
from .base import RecordStore


class InMemoryRecordStore(RecordStore):
    """Keeps records in a dictionary. Nothing survives the process.

    Snapshots are deep-copied in both directions so callers can never mutate
    the stored state by accident.
    """

    def __init__(self, records: dict[str, ProcessedRecord] | None = None):
        self._records: dict[str, ProcessedRecord] = copy.deepcopy(records or {})
        self.load_count = 0
        self.save_count = 0

    def load_all(self) -> dict[str, ProcessedRecord]:
        self.load_count += 1
        return copy.deepcopy(self._records)

    def save_all(self, records: dict[str, ProcessedRecord]) -> None:
        self.save_count += 1
        self._records = copy.deepcopy(records)
