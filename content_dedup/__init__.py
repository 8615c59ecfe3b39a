"""
Content Dedup - near-duplicate detection for ingested content.

This package decides, for each incoming article, repository or post, whether
it is identical, substantially similar, or novel relative to everything
already processed, and keeps the durable record of processed content.

Main entry point for scripts is the CLI via the `content-dedup` command.

Example:
    $ content-dedup filter -i items.json --commit
"""

__all__ = [
    "__version__",
    "ContentItem",
    "ProcessedRecord",
    "DuplicateDetector",
    "DuplicateOptions",
    "dedupe_batch",
    "fingerprint",
    "normalize_text",
]
__version__ = "0.1.0"

from .core import (
    ContentItem,
    DuplicateDetector,
    DuplicateOptions,
    ProcessedRecord,
    dedupe_batch,
    fingerprint,
    normalize_text,
)
