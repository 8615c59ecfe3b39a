"""Storage contract for processed records, and its error types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
import logging
from typing import Any

from ..core.types import ProcessedRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("fingerprint", "title", "url", "source", "published_at")


class StorageError(Exception):
    """Base class for record store failures."""


class StorageReadError(StorageError):
    """The store could not be read, or its contents could not be decoded."""


class StorageWriteError(StorageError):
    """The store could not persist a snapshot."""


class RecordStore(ABC):
    """Durable storage of processed records keyed by fingerprint.

    Implementations must round-trip ProcessedRecord losslessly and offer
    read-after-write consistency within the same process.
    """

    @abstractmethod
    def load_all(self) -> dict[str, ProcessedRecord]:
        """Return a full snapshot of stored records.

        Raises:
            StorageReadError: If the store is unreachable or corrupt
        """
        raise NotImplementedError

    @abstractmethod
    def save_all(self, records: dict[str, ProcessedRecord]) -> None:
        """Persist a full snapshot, replacing the previous one.

        Raises:
            StorageWriteError: If the snapshot could not be persisted
        """
        raise NotImplementedError


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a timezone-aware datetime."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_to_dict(record: ProcessedRecord) -> dict[str, Any]:
    """Serialize a record to JSON-compatible primitives."""
    return {
        "fingerprint": record.fingerprint,
        "title": record.title,
        "url": record.url,
        "source": record.source,
        "published_at": record.published_at.isoformat(),
        "excerpt": record.excerpt,
        "first_processed_at": record.first_processed_at.isoformat(),
        "last_seen_at": record.last_seen_at.isoformat(),
        "times_processed": record.times_processed,
        "sources": list(record.sources),
        "author": record.author,
    }


def record_from_dict(data: dict[str, Any]) -> ProcessedRecord | None:
    """Decode a stored record, coercing defaultable fields.

    Records missing a required field are skipped with a warning rather than
    passed on half-populated.

    Args:
        data: The stored mapping

    Returns:
        A ProcessedRecord, or None if the mapping is unusable
    """
    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        logger.warning(
            f"Skipping stored record {data.get('fingerprint', 'unknown')}: "
            f"missing required fields ({', '.join(missing)})"
        )
        return None

    try:
        published_at = parse_iso8601(str(data["published_at"]))
        first_raw = data.get("first_processed_at")
        first_processed_at = parse_iso8601(str(first_raw)) if first_raw else published_at
        last_raw = data.get("last_seen_at")
        last_seen_at = parse_iso8601(str(last_raw)) if last_raw else first_processed_at
    except ValueError:
        logger.warning(f"Skipping stored record {data['fingerprint']}: invalid timestamp")
        return None

    times_processed = data.get("times_processed")
    if isinstance(times_processed, bool) or not isinstance(times_processed, int) or times_processed < 1:
        times_processed = 1

    source = str(data["source"])
    raw_sources = data.get("sources")
    if not isinstance(raw_sources, (list, tuple)):
        raw_sources = []
    sources = [str(s) for s in raw_sources if s]
    if source not in sources:
        sources.insert(0, source)

    author = data.get("author")
    if author is not None and not isinstance(author, str):
        author = str(author)

    return ProcessedRecord(
        fingerprint=str(data["fingerprint"]),
        title=str(data["title"]),
        url=str(data["url"]),
        source=source,
        published_at=published_at,
        excerpt=str(data.get("excerpt") or ""),
        first_processed_at=first_processed_at,
        last_seen_at=max(last_seen_at, first_processed_at),
        times_processed=times_processed,
        sources=sources,
        author=author,
    )
