"""
Near-duplicate detection over previously processed content.

This module answers, for any incoming item, whether it is an exact
duplicate, a near-duplicate, or novel relative to the record store:
1. Exact match on the content fingerprint
2. Weighted similarity scan over records published within the time window

Lookups fail open on any store load failure and report the item as unique.
Commits fail closed and raise, so a failed commit is never mistaken for a
recorded one.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
import logging
import threading
from typing import Callable, Iterable

from ..config import AppConfig
from ..logging_utils import log_event
from ..storage.base import RecordStore
from ..storage.cache import RecordCache
from ..storage.factory import create_store
from .fingerprint import build_record, ensure_utc, fingerprint
from .similarity import SimilarityScorer, SimilarityWeights
from .types import (
    ContentItem,
    DetectionStats,
    DuplicateCheck,
    DuplicateEntry,
    FilterResult,
    ProcessedRecord,
)

logger = logging.getLogger(__name__)

REASON_EXACT = "exact_hash_match"
REASON_NO_MATCH = "no_similar_articles"
REASON_ERROR = "error_in_detection"
ACTIVITY_DAYS = 7


@dataclass(frozen=True)
class DuplicateOptions:
    """Per-lookup tuning.

    Attributes:
        title_similarity_threshold: Combined score at or above which a candidate matches
        content_similarity_threshold: Informational excerpt threshold, never gates a decision
        time_window_hours: Trailing window of publication times eligible for fuzzy matching
        max_candidates: Cap on in-window records scanned, most recent first; None for no cap
    """

    title_similarity_threshold: float = 0.85
    content_similarity_threshold: float = 0.70
    time_window_hours: float = 24
    max_candidates: int | None = None

    def __post_init__(self) -> None:
        for name in ("title_similarity_threshold", "content_similarity_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.time_window_hours < 0:
            raise ValueError("time_window_hours must be non-negative")
        if self.max_candidates is not None and self.max_candidates < 1:
            raise ValueError("max_candidates must be at least 1")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DuplicateDetector:
    """Detects duplicates of one content family against a record store.

    The store handle is injected; the detector owns the snapshot cache in
    front of it. Only commit and cleanup mutate the store, and they are
    serialized against each other within the process.

    Attributes:
        store: Durable record store
        cache: Snapshot cache in front of the store
        scorer: Weighted similarity scorer
        default_options: Options used when a call passes none
    """

    def __init__(
        self,
        store: RecordStore,
        cache: RecordCache | None = None,
        scorer: SimilarityScorer | None = None,
        default_options: DuplicateOptions | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.cache = cache or RecordCache()
        self.scorer = scorer or SimilarityScorer()
        self.default_options = default_options or DuplicateOptions()
        self._clock = clock
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: AppConfig, store: RecordStore | None = None) -> "DuplicateDetector":
        """Build a detector, and its store unless one is given, from config."""
        detector_cfg = cfg.detector
        weights = SimilarityWeights(
            title=detector_cfg.title_weight,
            excerpt=detector_cfg.excerpt_weight,
            url=detector_cfg.url_weight,
        )
        options = DuplicateOptions(
            title_similarity_threshold=detector_cfg.title_similarity_threshold,
            content_similarity_threshold=detector_cfg.content_similarity_threshold,
            time_window_hours=detector_cfg.time_window_hours,
            max_candidates=detector_cfg.max_candidates,
        )
        return cls(
            store=store or create_store(cfg.store, detector_cfg.family),
            cache=RecordCache(ttl_seconds=cfg.cache.ttl_seconds),
            scorer=SimilarityScorer(weights),
            default_options=options,
        )

    def is_duplicate(
        self, item: ContentItem, options: DuplicateOptions | None = None
    ) -> DuplicateCheck:
        """Check one item against every previously committed record.

        Args:
            item: The incoming item
            options: Lookup tuning; the detector defaults when None

        Returns:
            A DuplicateCheck. Any failure to load the records yields a
            non-duplicate result with reason "error_in_detection".
        """
        options = options or self.default_options
        try:
            records = self._load_records()
        except Exception as exc:
            log_event(
                logger,
                "Record store unavailable, treating item as unique",
                level=logging.WARNING,
                event="lookup_fail_open",
                url=item.url,
                error=f"{type(exc).__name__}: {exc}",
            )
            return DuplicateCheck(is_duplicate=False, similarity=0.0, reason=REASON_ERROR)
        return self._check(item, records, options)

    def filter_duplicates(
        self, items: Iterable[ContentItem], options: DuplicateOptions | None = None
    ) -> FilterResult:
        """Partition a batch into unique items and duplicates, in input order.

        Every item is compared against the same snapshot of committed records;
        items of the batch are not compared with each other, and the store is
        not modified.
        """
        options = options or self.default_options
        result = FilterResult()
        try:
            records: dict[str, ProcessedRecord] | None = self._load_records()
        except Exception as exc:
            log_event(
                logger,
                "Record store unavailable, passing batch through",
                level=logging.WARNING,
                event="lookup_fail_open",
                error=f"{type(exc).__name__}: {exc}",
            )
            records = None

        for item in items:
            if records is None:
                result.unique_items.append(item)
                continue
            check = self._check(item, records, options)
            if check.is_duplicate:
                result.duplicates.append(
                    DuplicateEntry(
                        item=item,
                        similarity=check.similarity,
                        reason=check.reason,
                        existing_record=check.existing_record,
                    )
                )
            else:
                result.unique_items.append(item)

        log_event(
            logger,
            "Filtered batch",
            event="filter_complete",
            unique=len(result.unique_items),
            duplicates=len(result.duplicates),
        )
        return result

    def add_processed_article(self, item: ContentItem) -> ProcessedRecord:
        """Commit an accepted item.

        Creates a record for a new fingerprint, or bumps times_processed,
        last_seen_at and sources on an existing one.

        Raises:
            StorageReadError: If the current records cannot be loaded
            StorageWriteError: If the updated records cannot be persisted
        """
        return self.mark_processed([item])[0]

    def mark_processed(self, items: Iterable[ContentItem]) -> list[ProcessedRecord]:
        """Commit several accepted items with one store load and one save.

        Raises:
            StorageReadError: If the current records cannot be loaded
            StorageWriteError: If the updated records cannot be persisted
        """
        items = list(items)
        if not items:
            return []

        with self._write_lock:
            records = dict(self.store.load_all())
            now = self._clock()
            committed: list[ProcessedRecord] = []
            for item in items:
                record = self._upsert(records, item, now)
                committed.append(record)
            try:
                self.store.save_all(records)
            except Exception:
                # Store state is unknown after a failed write
                self.cache.invalidate()
                raise
            self.cache.replace(records)

        log_event(
            logger,
            "Committed processed items",
            event="commit",
            count=len(committed),
            total=len(records),
        )
        return committed

    def get_stats(self) -> DetectionStats:
        """Summarize the store without modifying it.

        Raises:
            StorageReadError: If the records cannot be loaded
        """
        records = self._load_records()
        now = self._clock()
        week_ago = now - timedelta(days=ACTIVITY_DAYS)

        stats = DetectionStats(total_processed=len(records))
        sources: set[str] = set()
        total_times = 0
        daily: dict[str, int] = defaultdict(int)

        for record in records.values():
            stats.duplicates_detected += record.times_processed - 1
            total_times += record.times_processed
            sources.update(record.sources)
            if record.first_processed_at >= week_ago:
                day = record.first_processed_at.astimezone(timezone.utc).date().isoformat()
                daily[day] += 1

        stats.unique_sources = sorted(sources)
        if records:
            stats.average_times_processed = total_times / len(records)
        stats.recent_activity = sorted(daily.items())
        return stats

    def cleanup(self, older_than_days: int = 30) -> int:
        """Delete records last seen before the retention horizon.

        Args:
            older_than_days: Retention horizon in days, at least 1

        Returns:
            Number of records removed

        Raises:
            ValueError: If older_than_days is below 1
            StorageReadError: If the records cannot be loaded
            StorageWriteError: If the pruned records cannot be persisted
        """
        if older_than_days < 1:
            raise ValueError("older_than_days must be at least 1")

        with self._write_lock:
            records = self.store.load_all()
            cutoff = self._clock() - timedelta(days=older_than_days)
            kept = {key: record for key, record in records.items() if record.last_seen_at >= cutoff}
            removed = len(records) - len(kept)
            if removed:
                self.store.save_all(kept)
            self.cache.replace(kept)

        if removed:
            log_event(
                logger,
                f"Cleaned up {removed} records older than {older_than_days} days",
                event="cleanup",
                removed=removed,
                remaining=len(kept),
            )
        return removed

    def _load_records(self) -> dict[str, ProcessedRecord]:
        """Return the cached snapshot, refreshing it from the store on expiry."""
        records = self.cache.get()
        if records is not None:
            return records
        records = self.store.load_all()
        self.cache.replace(records)
        log_event(logger, "Refreshed record cache", level=logging.DEBUG, event="cache_refresh", total=len(records))
        return records

    def _check(
        self,
        item: ContentItem,
        records: dict[str, ProcessedRecord],
        options: DuplicateOptions,
    ) -> DuplicateCheck:
        key = fingerprint(item)
        existing = records.get(key)
        if existing is not None:
            log_event(logger, "Exact duplicate", level=logging.DEBUG, event="duplicate_exact", url=item.url)
            return DuplicateCheck(
                is_duplicate=True,
                similarity=1.0,
                reason=REASON_EXACT,
                existing_record=existing,
            )

        for candidate in self._candidates(records, options):
            score = self.scorer.score(item, candidate)
            if score >= options.title_similarity_threshold:
                log_event(
                    logger,
                    "Near duplicate",
                    level=logging.DEBUG,
                    event="duplicate_similar",
                    url=item.url,
                    matched_url=candidate.url,
                    similarity=score,
                )
                return DuplicateCheck(
                    is_duplicate=True,
                    similarity=score,
                    reason=f"title_similarity_{score * 100:.1f}%",
                    existing_record=candidate,
                )

        return DuplicateCheck(is_duplicate=False, similarity=0.0, reason=REASON_NO_MATCH)

    def _candidates(
        self, records: dict[str, ProcessedRecord], options: DuplicateOptions
    ) -> list[ProcessedRecord]:
        """Return in-window records, most recently published first."""
        cutoff = self._clock() - timedelta(hours=options.time_window_hours)
        in_window = [
            record for record in records.values() if ensure_utc(record.published_at) >= cutoff
        ]
        in_window.sort(key=lambda record: ensure_utc(record.published_at), reverse=True)
        if options.max_candidates is not None:
            return in_window[: options.max_candidates]
        return in_window

    def _upsert(
        self, records: dict[str, ProcessedRecord], item: ContentItem, now: datetime
    ) -> ProcessedRecord:
        key = fingerprint(item)
        existing = records.get(key)
        if existing is None:
            record = build_record(item, now)
        else:
            sources = list(existing.sources)
            if item.source not in sources:
                sources.append(item.source)
            # Copy rather than mutate: readers may hold the previous snapshot
            record = replace(
                existing,
                last_seen_at=max(now, existing.first_processed_at),
                times_processed=existing.times_processed + 1,
                sources=sources,
            )
        records[key] = record
        return record
