"""Tests for parsing batches of incoming items."""

from datetime import datetime, timezone

import pytest

from content_dedup.input.json_parser import item_to_dict, parse_items_json


def test_parses_items_envelope():
    items = parse_items_json(
        {
            "items": [
                {
                    "title": "OpenAI releases GPT-5",
                    "url": "https://techcrunch.com/2025/gpt5",
                    "source": "techcrunch",
                    "publishedAt": "2025-08-07T17:00:00Z",
                    "description": "The new model",
                    "author": "Jane Doe",
                }
            ]
        }
    )
    assert len(items) == 1
    item = items[0]
    assert item.source == "techcrunch"
    assert item.published_at == datetime(2025, 8, 7, 17, 0, tzinfo=timezone.utc)
    assert item.description == "The new model"
    assert item.content is None
    assert item.author == "Jane Doe"


def test_accepts_bare_list_and_articles_key():
    raw = [{"title": "T", "url": "https://example.com/a", "published_at": "2025-08-07T17:00:00+02:00"}]
    assert len(parse_items_json(raw)) == 1
    assert len(parse_items_json({"articles": raw})) == 1


def test_source_falls_back_to_hostname():
    items = parse_items_json([{"title": "T", "url": "https://github.com/org/repo"}])
    assert items[0].source == "github.com"


def test_missing_timestamp_defaults_to_now():
    before = datetime.now(timezone.utc)
    items = parse_items_json([{"title": "T", "url": "https://example.com/a"}])
    assert items[0].published_at >= before


def test_skips_incomplete_or_invalid_items():
    items = parse_items_json(
        [
            {"title": "No url"},
            {"url": "https://example.com/no-title"},
            {"title": "Bad time", "url": "https://example.com/x", "publishedAt": "someday"},
            "not an object",
            {"title": "Good", "url": "https://example.com/good"},
        ]
    )
    assert [item.title for item in items] == ["Good"]


def test_rejects_payload_without_items():
    with pytest.raises(ValueError):
        parse_items_json({"export": "nothing"})


def test_item_to_dict_uses_input_layout():
    item = parse_items_json(
        [{"title": "T", "url": "https://example.com/a", "source": "ex", "publishedAt": "2025-08-07T17:00:00Z"}]
    )[0]
    data = item_to_dict(item)
    assert data["publishedAt"] == "2025-08-07T17:00:00+00:00"
    assert parse_items_json([data]) == [item]
