"""
Command-line interface for the content duplicate detector.

Uses Typer to expose the detector operations over a JSON batch file and
the configured record store. Supports loading .env files for store
location overrides.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, load_config
from .core.dedup import dedupe_batch
from .core.detector import DuplicateDetector
from .core.types import ContentItem
from .input.json_parser import item_to_dict, parse_items_json
from .logging_utils import setup_logging
from .storage.base import StorageError

app = typer.Typer(add_completion=False)
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")
FamilyOption = typer.Option(None, "--family", "-f", help="Content family: articles, repos, tweets.")
StorePathOption = typer.Option(None, "--store-path", help="Override the record store file.")
LogLevelOption = typer.Option(None, "--log-level", help="Logging level.")


def _prepare(
    config: Path | None,
    family: str | None,
    store_path: Path | None,
    log_level: str | None,
) -> tuple[AppConfig, DuplicateDetector]:
    """Load .env and config, apply CLI overrides, and build the detector."""
    load_dotenv()

    cfg = load_config(str(config) if config else None)
    if family:
        cfg.detector.family = family
    if store_path is not None:
        cfg.store.backend = "json"
        cfg.store.path = str(store_path)
    if log_level:
        cfg.logging.level = log_level

    setup_logging(cfg.logging)
    return cfg, DuplicateDetector.from_config(cfg)


def _read_items(path: Path) -> list[ContentItem]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return parse_items_json(data)


def _fail(exc: Exception, label: str = "Storage error") -> NoReturn:
    console.print(f"[red]{label}:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.command()
def check(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    config: Path | None = ConfigOption,
    family: str | None = FamilyOption,
    store_path: Path | None = StorePathOption,
    log_level: str | None = LogLevelOption,
):
    """Report, for each item in the input file, whether it was seen before.

    The store is not modified.
    """
    _, detector = _prepare(config, family, store_path, log_level)
    items = _read_items(input)

    table = Table(title=f"Duplicate check ({len(items)} items)")
    table.add_column("Title")
    table.add_column("Duplicate")
    table.add_column("Similarity", justify="right")
    table.add_column("Reason")
    for item in items:
        result = detector.is_duplicate(item)
        table.add_row(
            item.title,
            "yes" if result.is_duplicate else "no",
            f"{result.similarity:.3f}",
            result.reason,
        )
    console.print(table)


@app.command("filter")
def filter_items(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write unique items to this JSON file."),
    commit: bool = typer.Option(False, "--commit/--no-commit", help="Record unique items as processed."),
    dedupe: bool = typer.Option(
        True, "--dedupe-batch/--no-dedupe-batch", help="Drop exact repeats within the batch first."
    ),
    config: Path | None = ConfigOption,
    family: str | None = FamilyOption,
    store_path: Path | None = StorePathOption,
    log_level: str | None = LogLevelOption,
):
    """Split the input file into unique items and duplicates.

    Args:
        input: JSON batch file
        output: Optional path for the unique items
        commit: Whether to commit the unique items to the store
        dedupe: Whether to drop exact in-batch repeats before filtering
        config: Optional path to YAML config file
        family: Content family override
        store_path: Record store file override
        log_level: Logging level override
    """
    _, detector = _prepare(config, family, store_path, log_level)
    items = _read_items(input)
    batch = dedupe_batch(items) if dedupe else items

    result = detector.filter_duplicates(batch)

    if commit and result.unique_items:
        try:
            detector.mark_processed(result.unique_items)
        except StorageError as exc:
            _fail(exc)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(
                {"items": [item_to_dict(item) for item in result.unique_items]},
                f,
                indent=2,
                ensure_ascii=False,
            )

    console.print(
        f"Input: {len(items)}  in-batch repeats: {len(items) - len(batch)}  "
        f"unique: {len(result.unique_items)}  duplicates: {len(result.duplicates)}"
    )
    for entry in result.duplicates:
        console.print(f"  [yellow]duplicate[/yellow] {entry.item.title} ({entry.reason})")
    if commit:
        console.print(f"Committed {len(result.unique_items)} items")


@app.command("commit")
def commit_items(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    config: Path | None = ConfigOption,
    family: str | None = FamilyOption,
    store_path: Path | None = StorePathOption,
    log_level: str | None = LogLevelOption,
):
    """Record every item in the input file as processed."""
    _, detector = _prepare(config, family, store_path, log_level)
    items = _read_items(input)
    try:
        records = detector.mark_processed(items)
    except StorageError as exc:
        _fail(exc)
    console.print(f"Committed {len(records)} items")


@app.command()
def stats(
    config: Path | None = ConfigOption,
    family: str | None = FamilyOption,
    store_path: Path | None = StorePathOption,
    log_level: str | None = LogLevelOption,
):
    """Show statistics over the record store."""
    cfg, detector = _prepare(config, family, store_path, log_level)
    try:
        result = detector.get_stats()
    except StorageError as exc:
        _fail(exc)

    table = Table(title=f"Duplicate detection stats ({cfg.detector.family})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total processed", str(result.total_processed))
    table.add_row("Duplicates detected", str(result.duplicates_detected))
    table.add_row("Unique sources", str(len(result.unique_sources)))
    table.add_row("Average times processed", f"{result.average_times_processed:.2f}")
    console.print(table)

    if result.unique_sources:
        console.print("Sources: " + ", ".join(result.unique_sources))
    for day, count in result.recent_activity:
        console.print(f"  {day}: {count}")


@app.command()
def cleanup(
    older_than_days: int | None = typer.Option(
        None, "--older-than-days", min=1, help="Retention horizon in days (default from config)."
    ),
    config: Path | None = ConfigOption,
    family: str | None = FamilyOption,
    store_path: Path | None = StorePathOption,
    log_level: str | None = LogLevelOption,
):
    """Delete records not seen within the retention horizon."""
    cfg, detector = _prepare(config, family, store_path, log_level)
    days = older_than_days if older_than_days is not None else cfg.detector.retention_days
    try:
        removed = detector.cleanup(days)
    except ValueError as exc:
        _fail(exc, label="Invalid retention")
    except StorageError as exc:
        _fail(exc)
    console.print(f"Cleaned up {removed} records older than {days} days")


if __name__ == "__main__":
    app()
