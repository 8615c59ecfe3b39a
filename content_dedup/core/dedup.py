"""
Batch-internal deduplication, applied before a batch reaches the detector.

The detector never compares items of the same batch with each other. This
module removes in-batch repeats based on:
1. Exact fingerprint matches (the same story fetched twice)
2. Optionally, combined similarity to an item already kept
"""

from __future__ import annotations

from datetime import datetime, timezone

from .fingerprint import build_record, fingerprint
from .similarity import SimilarityScorer
from .types import ContentItem, ProcessedRecord


def dedupe_batch(
    items: list[ContentItem],
    threshold: float | None = None,
    scorer: SimilarityScorer | None = None,
) -> list[ContentItem]:
    """Remove duplicate items from a batch.

    Deduplication happens in two passes per item:
    1. Skip items whose fingerprint was already kept
    2. If a threshold is given, skip items scoring at or above it against
       any kept item

    Args:
        items: Batch of incoming items
        threshold: Combined similarity (0-1) for in-batch near-duplicates,
                   or None to only drop exact repeats
        scorer: Scorer for the similarity pass, default weights if None

    Returns:
        Deduplicated list of items, preserving original order
    """
    seen: set[str] = set()
    kept: list[ContentItem] = []
    kept_records: list[ProcessedRecord] = []
    scorer = scorer or SimilarityScorer()
    now = datetime.now(timezone.utc)

    for item in items:
        key = fingerprint(item)
        # Skip if we've already kept this exact content
        if key in seen:
            continue
        if threshold is not None and _is_similar(item, kept_records, scorer, threshold):
            continue
        seen.add(key)
        kept.append(item)
        if threshold is not None:
            kept_records.append(build_record(item, now))

    return kept


def _is_similar(
    item: ContentItem,
    records: list[ProcessedRecord],
    scorer: SimilarityScorer,
    threshold: float,
) -> bool:
    for record in records:
        if scorer.score(item, record) >= threshold:
            return True
    return False
