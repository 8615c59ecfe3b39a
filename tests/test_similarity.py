"""Tests for string, URL and combined similarity."""

import pytest

from content_dedup.core.fingerprint import build_record
from content_dedup.core.similarity import (
    SimilarityScorer,
    SimilarityWeights,
    string_similarity,
    url_similarity,
)

from .conftest import NOW, make_item


def test_string_similarity_edge_cases():
    assert string_similarity("", "") == 1.0
    assert string_similarity("abc", "") == 0.0
    assert string_similarity("", "abc") == 0.0
    assert string_similarity("same", "same") == 1.0


def test_string_similarity_uses_levenshtein_ratio():
    # kitten -> sitting needs 3 edits over a longest length of 7
    assert string_similarity("kitten", "sitting") == pytest.approx(4 / 7)
    assert string_similarity("abc", "xyz") == 0.0


def test_string_similarity_is_symmetric():
    assert string_similarity("flaw", "lawn") == string_similarity("lawn", "flaw")


def test_url_same_host_and_path():
    assert url_similarity("https://techcrunch.com/2025/gpt5", "http://techcrunch.com/2025/gpt5") == 1.0


def test_url_host_comparison_ignores_case():
    assert url_similarity("https://TechCrunch.com/a", "https://techcrunch.com/a") == 1.0


def test_url_partial_path_overlap_is_scaled():
    score = url_similarity(
        "https://techcrunch.com/2025/gpt5", "https://techcrunch.com/2025/gpt5-update"
    )
    assert score == pytest.approx(0.5 * 0.8)


def test_url_overlap_counts_segments_of_first_url():
    score = url_similarity("https://example.com/a/b", "https://example.com/a/b/c/d")
    assert score == pytest.approx(0.8)


def test_url_root_path_against_article_path_scores_zero():
    assert url_similarity("https://example.com/", "https://example.com/a") == 0.0


def test_url_different_hosts_score_zero():
    assert url_similarity("https://techcrunch.com/a", "https://theverge.com/a") == 0.0


@pytest.mark.parametrize(
    "bad",
    ["", "not a url", "/relative/path", "http://[::1", "mailto:someone@example.com"],
)
def test_malformed_url_degrades_to_zero(bad):
    assert url_similarity(bad, "https://example.com/a") == 0.0
    assert url_similarity("https://example.com/a", bad) == 0.0


def test_weights_must_sum_to_one():
    SimilarityWeights(title=0.5, excerpt=0.25, url=0.25)
    with pytest.raises(ValueError, match="sum to 1.0"):
        SimilarityWeights(title=0.5, excerpt=0.3, url=0.1)


def test_weights_must_be_non_negative():
    with pytest.raises(ValueError, match="non-negative"):
        SimilarityWeights(title=1.2, excerpt=-0.1, url=-0.1)


def test_score_is_reflexive_for_item_with_excerpt():
    item = make_item(description="OpenAI shipped a new flagship model today.")
    record = build_record(item, NOW)
    assert SimilarityScorer().score(item, record) == pytest.approx(1.0)


def test_score_without_excerpt_drops_excerpt_weight():
    item = make_item()
    record = build_record(item, NOW)
    assert SimilarityScorer().score(item, record) == pytest.approx(0.7)


def test_breakdown_for_reworded_headline():
    stored = build_record(make_item(), NOW)
    incoming = make_item(
        title="OpenAI Releases GPT-5!!", url="https://techcrunch.com/2025/gpt5-update"
    )
    breakdown = SimilarityScorer().breakdown(incoming, stored)
    assert breakdown.title == 1.0
    assert breakdown.excerpt == 0.0
    assert breakdown.url == pytest.approx(0.4)
    assert breakdown.combined == pytest.approx(0.64)


def test_empty_title_only_matches_empty_title_from_same_source():
    scorer = SimilarityScorer()
    empty = make_item(title="", description="same body")
    assert scorer.score(empty, build_record(make_item(title="", description="same body"), NOW)) == pytest.approx(1.0)
    other_source = build_record(make_item(title="", source="theverge", description="same body"), NOW)
    assert scorer.score(empty, other_source) == 0.0
    titled = build_record(make_item(description="same body"), NOW)
    assert scorer.score(empty, titled) == 0.0
    assert scorer.score(make_item(description="same body"), build_record(empty, NOW)) == 0.0


def test_malformed_url_keeps_title_and_excerpt_scores():
    stored = build_record(make_item(description="body"), NOW)
    incoming = make_item(url="not a url", description="body")
    assert SimilarityScorer().score(incoming, stored) == pytest.approx(0.9)


def test_custom_weights_are_applied():
    scorer = SimilarityScorer(SimilarityWeights(title=1.0, excerpt=0.0, url=0.0))
    stored = build_record(make_item(), NOW)
    incoming = make_item(url="https://elsewhere.example.com/x")
    assert scorer.score(incoming, stored) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "title_a, title_b, desc_a, desc_b, url_b",
    [
        ("Alpha launch", "Beta launch", "short", "a much longer body text", "https://a.com/x"),
        ("", "", None, None, "https://a.com/x"),
        ("Same", "Same", "same", "same", "https://techcrunch.com/2025/gpt5"),
        ("x" * 200, "y" * 150, "z" * 600, "z" * 10, "bad url"),
    ],
)
def test_score_is_bounded(title_a, title_b, desc_a, desc_b, url_b):
    stored = build_record(make_item(title=title_b, description=desc_b, url=url_b), NOW)
    score = SimilarityScorer().score(make_item(title=title_a, description=desc_a), stored)
    assert 0.0 <= score <= 1.0
