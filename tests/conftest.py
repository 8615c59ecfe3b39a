"""Shared fixtures for detector tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from content_dedup.core.types import ContentItem

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Wall clock the tests can move by hand."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeMonotonic:
    """Monotonic seconds counter for cache TTL tests."""

    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def make_item(
    title: str = "OpenAI releases GPT-5",
    url: str = "https://techcrunch.com/2025/gpt5",
    source: str = "techcrunch",
    published_at: datetime | None = None,
    description: str | None = None,
    content: str | None = None,
) -> ContentItem:
    return ContentItem(
        title=title,
        url=url,
        source=source,
        published_at=published_at or NOW - timedelta(hours=1),
        description=description,
        content=content,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()
