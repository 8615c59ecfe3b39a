"""
Weighted multi-signal similarity between an incoming item and a stored record.

The combined score is a weighted sum of three signals, each in [0, 1]:
1. Title similarity (normalized Levenshtein ratio)
2. Excerpt similarity (same ratio over the bounded excerpt)
3. URL similarity (same host, identical or overlapping path)

Headline phrasing carries the most weight and URL structure the least.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from urllib.parse import urlparse

from rapidfuzz.distance import Levenshtein

from .fingerprint import build_excerpt
from .normalize import normalize_text
from .types import ContentItem, ProcessedRecord

PARTIAL_PATH_SCALE = 0.8


@dataclass(frozen=True)
class SimilarityWeights:
    """Weights of the title, excerpt and URL signals. Must sum to 1.0."""

    title: float = 0.6
    excerpt: float = 0.3
    url: float = 0.1

    def __post_init__(self) -> None:
        for name in ("title", "excerpt", "url"):
            if getattr(self, name) < 0:
                raise ValueError(f"Similarity weight '{name}' must be non-negative")
        total = math.fsum([self.title, self.excerpt, self.url])
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Similarity weights must sum to 1.0, got {total}")


@dataclass(frozen=True)
class SimilarityBreakdown:
    """Per-signal scores and their weighted combination."""

    title: float
    excerpt: float
    url: float
    combined: float


def string_similarity(a: str, b: str) -> float:
    """Return 1 - levenshtein(a, b) / max(len(a), len(b)).

    Two empty strings are identical (1.0); one empty string never matches (0.0).
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def url_similarity(url_a: str, url_b: str) -> float:
    """Score how likely two URLs point at the same story.

    Returns 1.0 for the same host and path. For the same host with different
    paths, returns the fraction of url_a's path segments that also occur in
    url_b's path, scaled by PARTIAL_PATH_SCALE. Different hosts, or a URL that
    does not parse as absolute, score 0.0.
    """
    parsed_a = _parse_absolute(url_a)
    parsed_b = _parse_absolute(url_b)
    if parsed_a is None or parsed_b is None:
        return 0.0

    host_a, path_a = parsed_a
    host_b, path_b = parsed_b
    if host_a != host_b:
        return 0.0
    if path_a == path_b:
        return 1.0

    segments_a = [segment for segment in path_a.split("/") if segment]
    segments_b = set(segment for segment in path_b.split("/") if segment)
    if not segments_a:
        return 0.0
    common = sum(1 for segment in segments_a if segment in segments_b)
    return common / len(segments_a) * PARTIAL_PATH_SCALE


def _parse_absolute(url: str) -> tuple[str, str] | None:
    """Return (hostname, path) for an absolute URL, or None."""
    if not url:
        return None
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not hostname:
        return None
    return hostname, parsed.path or "/"


class SimilarityScorer:
    """Scores an incoming item against a stored record.

    Attributes:
        weights: Signal weights used for the combined score
    """

    def __init__(self, weights: SimilarityWeights | None = None):
        self.weights = weights or SimilarityWeights()

    def score(self, item: ContentItem, record: ProcessedRecord) -> float:
        """Return the combined similarity in [0, 1]."""
        return self.breakdown(item, record).combined

    def breakdown(self, item: ContentItem, record: ProcessedRecord) -> SimilarityBreakdown:
        """Return every signal together with the combined score.

        An empty normalized title only ever matches another empty title from
        the same source; any other pairing involving an empty title scores 0.
        """
        title_a = normalize_text(item.title)
        title_b = normalize_text(record.title)
        if (not title_a or not title_b) and not (
            title_a == title_b and _same_source(item.source, record.source)
        ):
            return SimilarityBreakdown(title=0.0, excerpt=0.0, url=0.0, combined=0.0)

        title_score = string_similarity(title_a, title_b)

        excerpt_a = normalize_text(build_excerpt(item))
        excerpt_b = normalize_text(record.excerpt)
        excerpt_score = (
            string_similarity(excerpt_a, excerpt_b) if excerpt_a and excerpt_b else 0.0
        )

        url_score = url_similarity(item.url, record.url)

        combined = math.fsum(
            [
                title_score * self.weights.title,
                excerpt_score * self.weights.excerpt,
                url_score * self.weights.url,
            ]
        )
        return SimilarityBreakdown(
            title=title_score,
            excerpt=excerpt_score,
            url=url_score,
            combined=min(1.0, max(0.0, combined)),
        )


def _same_source(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()
