"""Tests for the command-line interface."""

import json

from rich.console import Console
from typer.testing import CliRunner

from content_dedup import cli
from content_dedup.cli import app

runner = CliRunner()

ITEMS = {
    "items": [
        {
            "title": "OpenAI releases GPT-5",
            "url": "https://techcrunch.com/2025/gpt5",
            "source": "techcrunch",
            "description": "OpenAI today released GPT-5 to all ChatGPT users.",
        },
        {
            "title": "Rust 2.0 roadmap published",
            "url": "https://blog.rust-lang.org/roadmap",
            "source": "rust-blog",
        },
        {
            "title": "OpenAI releases GPT-5",
            "url": "https://techcrunch.com/2025/gpt5",
            "source": "techcrunch",
            "description": "OpenAI today released GPT-5 to all ChatGPT users.",
        },
    ]
}


def _write_items(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(ITEMS), encoding="utf-8")
    return path


def test_filter_commit_then_detect(tmp_path):
    items_path = _write_items(tmp_path)
    store_path = tmp_path / "store.json"
    output_path = tmp_path / "unique.json"

    result = runner.invoke(
        app,
        [
            "filter", "-i", str(items_path), "--store-path", str(store_path),
            "--commit", "--output", str(output_path),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "unique: 2" in result.output

    stored = json.loads(store_path.read_text(encoding="utf-8"))
    assert stored["total"] == 2
    unique = json.loads(output_path.read_text(encoding="utf-8"))
    assert [item["title"] for item in unique["items"]] == [
        "OpenAI releases GPT-5",
        "Rust 2.0 roadmap published",
    ]

    again = runner.invoke(app, ["filter", "-i", str(items_path), "--store-path", str(store_path)])
    assert again.exit_code == 0, again.output
    assert "duplicates: 2" in again.output


def test_filter_without_batch_dedupe_keeps_repeats(tmp_path):
    items_path = _write_items(tmp_path)
    result = runner.invoke(
        app,
        ["filter", "-i", str(items_path), "--store-path", str(tmp_path / "s.json"), "--no-dedupe-batch"],
    )
    assert result.exit_code == 0, result.output
    assert "unique: 3" in result.output
    assert not (tmp_path / "s.json").exists()


def test_commit_stats_and_cleanup(tmp_path):
    items_path = _write_items(tmp_path)
    store_path = tmp_path / "store.json"

    committed = runner.invoke(app, ["commit", "-i", str(items_path), "--store-path", str(store_path)])
    assert committed.exit_code == 0, committed.output
    assert "Committed 3 items" in committed.output

    stats = runner.invoke(app, ["stats", "--store-path", str(store_path)])
    assert stats.exit_code == 0, stats.output
    assert "Total processed" in stats.output
    assert "rust-blog" in stats.output

    cleaned = runner.invoke(app, ["cleanup", "--older-than-days", "30", "--store-path", str(store_path)])
    assert cleaned.exit_code == 0, cleaned.output
    assert "Cleaned up 0 records" in cleaned.output


def test_cleanup_rejects_zero_days(tmp_path):
    result = runner.invoke(
        app, ["cleanup", "--older-than-days", "0", "--store-path", str(tmp_path / "s.json")]
    )
    assert result.exit_code != 0


def test_check_reports_each_item(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "console", Console(width=200))
    items_path = _write_items(tmp_path)
    store_path = tmp_path / "store.json"
    runner.invoke(app, ["commit", "-i", str(items_path), "--store-path", str(store_path)])

    result = runner.invoke(app, ["check", "-i", str(items_path), "--store-path", str(store_path)])
    assert result.exit_code == 0, result.output
    assert "exact_hash_match" in result.output


def test_storage_error_exits_non_zero(tmp_path):
    items_path = _write_items(tmp_path)
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    result = runner.invoke(
        app, ["commit", "-i", str(items_path), "--store-path", str(blocker / "store.json")]
    )
    assert result.exit_code == 1
    assert "Storage error" in result.output


def test_cleanup_with_zero_retention_in_config_exits_cleanly(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("detector:\n  retention_days: 0\n", encoding="utf-8")
    result = runner.invoke(
        app, ["cleanup", "--config", str(config_path), "--store-path", str(tmp_path / "s.json")]
    )
    assert result.exit_code == 1
    assert "Invalid retention" in result.output
