"""
Core domain models and business logic.

This package contains the data types, text canonicalization, fingerprinting,
similarity scoring and the duplicate detector itself.
"""

from .types import (
    ContentItem,
    DetectionStats,
    DuplicateCheck,
    DuplicateEntry,
    FilterResult,
    ProcessedRecord,
)
from .normalize import normalize_text
from .fingerprint import build_excerpt, build_record, fingerprint
from .similarity import SimilarityScorer, SimilarityWeights, string_similarity, url_similarity
from .dedup import dedupe_batch
from .detector import DuplicateDetector, DuplicateOptions

__all__ = [
    "ContentItem",
    "ProcessedRecord",
    "DuplicateCheck",
    "DuplicateEntry",
    "FilterResult",
    "DetectionStats",
    "normalize_text",
    "build_excerpt",
    "build_record",
    "fingerprint",
    "SimilarityScorer",
    "SimilarityWeights",
    "string_similarity",
    "url_similarity",
    "dedupe_batch",
    "DuplicateDetector",
    "DuplicateOptions",
]
