# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Metric Vocabulary — The allow-list of recognized metric names.

Every unknown name would otherwise create a fresh row per day, so the
recorder resolves names here before touching the store.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from kaiville_metrics.core.errors import UnknownMetricError

logger = logging.getLogger("kaiville.vocabulary")


class MetricName(str, Enum):
    """Research center usage counters."""

    DAILY_SUBMISSIONS = "daily_submissions"      # articles submitted
    ARTICLES_APPROVED = "articles_approved"      # approved by moderators
    ARTICLES_REJECTED = "articles_rejected"      # rejected by moderators
    SEARCH_QUERIES = "search_queries"
    ARTICLE_VIEWS = "article_views"
    VOTES_CAST = "votes_cast"                    # up and down votes
    LLM_API_CALLS = "llm_api_calls"
    LLM_TOKENS_USED = "llm_tokens_used"
    CACHE_HITS = "cache_hits"                    # LLM formatting cache
    FORMATTING_FAILURES = "formatting_failures"
    ARTICLE_EDITS = "article_edits"


class MetricVocabulary:
    """
    Resolves caller-supplied names against the allow-list.

    Policies:
      - reject:     unknown names raise UnknownMetricError
      - quarantine: unknown names are redirected to a single quarantine
                    bucket, tagged with the original name
    """

    def __init__(
        self,
        extra_names: Iterable[str] = (),
        policy: str = "reject",
        quarantine_name: str = "unrecognized_metrics",
    ) -> None:
        if policy not in ("reject", "quarantine"):
            raise ValueError(f"Unknown metric name policy '{policy}'")
        self._names: FrozenSet[str] = frozenset(
            [m.value for m in MetricName] + [n for n in extra_names if n]
        )
        self._policy = policy
        self._quarantine_name = quarantine_name

    @property
    def names(self) -> FrozenSet[str]:
        return self._names

    @property
    def policy(self) -> str:
        return self._policy

    def __contains__(self, name: Any) -> bool:
        return normalize_name(name) in self._names

    def resolve(
        self, name: Any, metadata: Optional[Dict[str, Any]] = None
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Map a caller-supplied name to the bucket name to write.

        Returns (bucket_name, metadata). Raises UnknownMetricError under the
        reject policy.
        """
        metadata = dict(metadata or {})
        normalized = normalize_name(name)
        if normalized in self._names:
            return normalized, metadata

        if normalized and self._policy == "quarantine":
            logger.warning(
                "Quarantining unrecognized metric '%s' into '%s'",
                name, self._quarantine_name,
            )
            metadata["original_name"] = str(name)
            return self._quarantine_name, metadata

        raise UnknownMetricError(name)


def normalize_name(name: Any) -> Optional[str]:
    """Canonical string for a metric name, or None if it is not a name at all."""
    if isinstance(name, MetricName):
        return name.value
    if isinstance(name, str):
        return name.strip()
    return None
