"""JSON parser for batches of incoming content items.

Accepted layouts:
- {"items": [...]} or {"articles": [...]}
- A bare list of item objects

Each item uses camelCase keys as produced by the fetchers (``publishedAt``)
or their snake_case equivalents (``published_at``).
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from urllib.parse import urlparse

from ..core.types import ContentItem
from ..storage.base import parse_iso8601

logger = logging.getLogger(__name__)


def parse_items_json(data: dict[str, Any] | list[Any]) -> list[ContentItem]:
    """Parse a JSON payload into a list of ContentItem objects.

    Example item:
        {
            "title": "OpenAI releases GPT-5",
            "url": "https://techcrunch.com/2025/gpt5",
            "source": "techcrunch",
            "publishedAt": "2025-08-07T17:00:00Z",
            "description": "The new model ...",
            "author": "Jane Doe"
        }

    Args:
        data: The parsed JSON content

    Returns:
        A list of ContentItem objects. Items with missing title or url, or
        with an unparseable timestamp, are skipped with a warning. A missing
        source falls back to the URL hostname, and a missing timestamp to
        the current time.

    Raises:
        ValueError: If the payload has no item list
    """
    if isinstance(data, dict):
        raw_items = data.get("items", data.get("articles"))
    else:
        raw_items = data
    if not isinstance(raw_items, list):
        raise ValueError("Invalid JSON format: expected an 'items' list")

    items: list[ContentItem] = []

    for raw in raw_items:
        if not isinstance(raw, dict):
            continue

        title = raw.get("title")
        url = raw.get("url")
        if not title or not url:
            item_id = raw.get("id", "unknown")
            logger.warning(f"Skipping item {item_id}: missing required fields (title or url)")
            continue

        source = raw.get("source") or urlparse(url).netloc
        if not source:
            logger.warning(f"Skipping item {url}: no source and no hostname in url")
            continue

        published_raw = raw.get("publishedAt") or raw.get("published_at")
        if published_raw:
            try:
                published_at = parse_iso8601(str(published_raw))
            except ValueError:
                logger.warning(f"Skipping item {url}: invalid publish time {published_raw!r}")
                continue
        else:
            published_at = datetime.now(timezone.utc)

        items.append(
            ContentItem(
                title=str(title),
                url=str(url),
                source=str(source),
                published_at=published_at,
                description=raw.get("description") or None,
                content=raw.get("content") or None,
                author=raw.get("author") or None,
            )
        )

    return items


def item_to_dict(item: ContentItem) -> dict[str, Any]:
    """Serialize an item back to the camelCase input layout."""
    return {
        "title": item.title,
        "url": item.url,
        "source": item.source,
        "publishedAt": item.published_at.isoformat(),
        "description": item.description,
        "content": item.content,
        "author": item.author,
    }
