"""Text canonicalization shared by fingerprinting and similarity scoring."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Canonicalize text for comparison.

    Lower-cases, removes every character outside the word and whitespace
    classes, collapses whitespace runs to a single space and trims the ends.
    The result is stable under repeated application.

    Args:
        text: Raw text, may be None

    Returns:
        The normalized text, or "" for empty or whitespace-only input
    """
    if not text:
        return ""
    normalized = _NON_WORD_RE.sub("", text.lower())
    # Stripping can expose new whitespace runs (e.g. "a - b")
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()
