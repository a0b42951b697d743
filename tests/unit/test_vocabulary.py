# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
"""Unit tests for the metric name vocabulary."""

import pytest

from kaiville_metrics.core.errors import UnknownMetricError
from kaiville_metrics.core.vocabulary import MetricName, MetricVocabulary, normalize_name


class TestMetricName:
    def test_has_eleven_counters(self):
        assert len(MetricName) == 11

    def test_values_are_snake_case(self):
        for m in MetricName:
            assert m.value == m.value.lower()
            assert " " not in m.value

    def test_str_compatible(self):
        assert MetricName.ARTICLE_VIEWS == "article_views"


class TestNormalizeName:
    def test_enum_member(self):
        assert normalize_name(MetricName.CACHE_HITS) == "cache_hits"

    def test_strips_whitespace(self):
        assert normalize_name("  votes_cast ") == "votes_cast"

    def test_non_string(self):
        assert normalize_name(42) is None
        assert normalize_name(None) is None


class TestMetricVocabulary:
    def test_builtin_names_known(self):
        vocab = MetricVocabulary()
        assert "search_queries" in vocab
        assert MetricName.LLM_TOKENS_USED in vocab
        assert "made_up" not in vocab

    def test_extra_names(self):
        vocab = MetricVocabulary(extra_names=["newsletter_signups", ""])
        assert "newsletter_signups" in vocab
        assert "" not in vocab.names

    def test_resolve_known(self):
        vocab = MetricVocabulary()
        name, meta = vocab.resolve(MetricName.ARTICLE_EDITS, {"by": "u1"})
        assert name == "article_edits"
        assert meta == {"by": "u1"}

    def test_resolve_does_not_mutate_metadata(self):
        vocab = MetricVocabulary(policy="quarantine")
        original = {"k": 1}
        vocab.resolve("typo_metric", original)
        assert original == {"k": 1}

    def test_reject_policy(self):
        vocab = MetricVocabulary()
        with pytest.raises(UnknownMetricError):
            vocab.resolve("artcle_views")

    def test_quarantine_policy(self):
        vocab = MetricVocabulary(policy="quarantine", quarantine_name="junk")
        name, meta = vocab.resolve("artcle_views", {"a": 1})
        assert name == "junk"
        assert meta == {"a": 1, "original_name": "artcle_views"}

    def test_quarantine_still_rejects_empty(self):
        vocab = MetricVocabulary(policy="quarantine")
        with pytest.raises(UnknownMetricError):
            vocab.resolve("   ")
        with pytest.raises(UnknownMetricError):
            vocab.resolve(None)

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            MetricVocabulary(policy="ignore")
