"""
Core data types for the content duplicate detector.

This module defines the data structures shared by every component:
- ContentItem: An incoming article, repository or post to be checked
- ProcessedRecord: The persisted record of a previously accepted item
- DuplicateCheck / DuplicateEntry / FilterResult: Lookup results
- DetectionStats: Aggregate statistics over the record store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ContentItem:
    """Represents one incoming piece of content.

    Attributes:
        title: The headline, repository name or post text
        url: Absolute URL of the content
        source: Source tag (e.g., "techcrunch", "github")
        published_at: Timezone-aware publication timestamp
        description: Optional summary, preferred over content for the excerpt
        content: Optional full body text
        author: Optional author name
    """
    title: str
    url: str
    source: str
    published_at: datetime
    description: str | None = None
    content: str | None = None
    author: str | None = None


@dataclass
class ProcessedRecord:
    """A previously accepted item, keyed by its fingerprint.

    Attributes:
        fingerprint: SHA-256 digest of normalized title, excerpt and source
        title: Title of the first item that produced this fingerprint
        url: URL of the first item
        source: Source tag of the first item
        published_at: Publication timestamp of the first item
        excerpt: Bounded raw excerpt used for later similarity scoring
        first_processed_at: When the record was created
        last_seen_at: When the fingerprint was last committed
        times_processed: Number of commits that mapped to this fingerprint
        sources: Source tags that produced this fingerprint, in first-seen order
        author: Optional author of the first item
    """
    fingerprint: str
    title: str
    url: str
    source: str
    published_at: datetime
    excerpt: str
    first_processed_at: datetime
    last_seen_at: datetime
    times_processed: int = 1
    sources: list[str] = field(default_factory=list)
    author: str | None = None


@dataclass
class DuplicateCheck:
    """Result of a single duplicate lookup."""
    is_duplicate: bool
    similarity: float
    reason: str
    existing_record: ProcessedRecord | None = None


@dataclass
class DuplicateEntry:
    """A batch item rejected as a duplicate, with the evidence for it."""
    item: ContentItem
    similarity: float
    reason: str
    existing_record: ProcessedRecord | None = None


@dataclass
class FilterResult:
    """Partition of a batch into unique items and duplicates, in input order."""
    unique_items: list[ContentItem] = field(default_factory=list)
    duplicates: list[DuplicateEntry] = field(default_factory=list)


@dataclass
class DetectionStats:
    """Aggregate statistics over all stored records.

    Attributes:
        total_processed: Number of distinct fingerprints in the store
        duplicates_detected: Sum of (times_processed - 1) over all records
        unique_sources: Sorted list of every source tag seen
        average_times_processed: Mean times_processed, 0.0 for an empty store
        recent_activity: (YYYY-MM-DD, count) buckets for the trailing week
    """
    total_processed: int = 0
    duplicates_detected: int = 0
    unique_sources: list[str] = field(default_factory=list)
    average_times_processed: float = 0.0
    recent_activity: list[tuple[str, int]] = field(default_factory=list)
