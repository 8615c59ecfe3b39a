"""
Content fingerprinting for the exact-duplicate fast path.

A fingerprint is the SHA-256 digest of the normalized title, the normalized
bounded excerpt and the lower-cased source tag, joined with "|". It is a
pure function of those values, so it stays stable across process restarts.
"""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib

from .normalize import normalize_text
from .types import ContentItem, ProcessedRecord

EXCERPT_LIMIT = 500
EXCERPT_EDGE = 200
EXCERPT_SEPARATOR = " ... "


def build_excerpt(item: ContentItem) -> str:
    """Return the bounded raw excerpt for an item.

    The description is preferred over the content. Text longer than
    EXCERPT_LIMIT characters keeps only its first and last EXCERPT_EDGE
    characters, so both the lede and the conclusion take part in matching.

    Args:
        item: The content item

    Returns:
        The excerpt text (not normalized), "" if the item has no body text
    """
    text = item.description or item.content or ""
    if len(text) > EXCERPT_LIMIT:
        return f"{text[:EXCERPT_EDGE]}{EXCERPT_SEPARATOR}{text[-EXCERPT_EDGE:]}"
    return text


def fingerprint(item: ContentItem) -> str:
    """Compute the hex SHA-256 fingerprint of an item."""
    title = normalize_text(item.title)
    excerpt = normalize_text(build_excerpt(item))
    combined = f"{title}|{excerpt}|{item.source.strip().lower()}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def build_record(item: ContentItem, now: datetime) -> ProcessedRecord:
    """Create the first ProcessedRecord for an item accepted at ``now``."""
    return ProcessedRecord(
        fingerprint=fingerprint(item),
        title=item.title,
        url=item.url,
        source=item.source,
        published_at=ensure_utc(item.published_at),
        excerpt=build_excerpt(item),
        first_processed_at=now,
        last_seen_at=now,
        times_processed=1,
        sources=[item.source],
        author=item.author,
    )


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
