"""Scoring primitives for insight prioritization.

Pure functions with no shared state. Every score lands in [0, 1] unless noted.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from insightflow.models.insight import Insight, InsightEvidence, ensure_aware

SECONDS_PER_DAY = 86400.0

# Used for insights whose timeframe ended outside the scoring window.
RECENCY_FLOOR = 0.1

SCORE_BUCKETS = ("0.0-0.2", "0.2-0.4", "0.4-0.6", "0.6-0.8", "0.8-1.0")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def days_between(earlier: datetime, later: datetime) -> float:
    delta = ensure_aware(later) - ensure_aware(earlier)
    return abs(delta.total_seconds()) / SECONDS_PER_DAY


def recency_score(
    end: datetime,
    now: datetime,
    *,
    enabled: bool = True,
    decay_factor: float = 0.1,
    window_days: float = 90,
) -> float:
    """Exponential decay on the days since ``end``, floored outside the window."""
    if not enabled:
        return 0.5
    days = days_between(end, now)
    if days > window_days:
        return RECENCY_FLOOR
    return math.exp(-decay_factor * days / window_days)


def frequency_score(evidence_count: int, related_count: int) -> float:
    return 0.7 * min(evidence_count / 10, 1.0) + 0.3 * min(related_count / 5, 1.0)


def evidence_quality_score(evidence: Sequence[InsightEvidence]) -> float:
    """Mean relevance plus a small bonus for varied evidence types."""
    if not evidence:
        return 0.0
    average = sum(item.relevance_score for item in evidence) / len(evidence)
    distinct_types = len({item.evidence_type for item in evidence})
    return min(1.0, average + min(distinct_types / 4, 0.2))


def _tokens(text: str) -> set:
    return {token for token in text.lower().split() if token}


def text_similarity(a: str, b: str) -> float:
    """Word-level Jaccard similarity."""
    words_a = _tokens(a)
    words_b = _tokens(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def keyword_overlap(a: Iterable[str], b: Iterable[str]) -> float:
    set_a = {k.lower() for k in a}
    set_b = {k.lower() for k in b}
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def insight_similarity(a: Insight, b: Insight) -> float:
    return (
        0.4 * text_similarity(a.title, b.title)
        + 0.3 * text_similarity(a.description, b.description)
        + 0.2 * keyword_overlap(a.keywords, b.keywords)
        + 0.1 * (1.0 if a.category == b.category else 0.0)
    )


def shannon_diversity(counts: Mapping[object, int]) -> float:
    """Shannon entropy (base 2) of a distribution given as counts."""
    total = sum(counts.values())
    if total <= 0:
        return 0.0
    entropy = 0.0
    for count in counts.values():
        if count > 0:
            p = count / total
            entropy -= p * math.log2(p)
    return entropy


def score_bucket(score: float) -> str:
    """Five 0.2-wide buckets; anything at or above 0.8 falls in the last."""
    for upper, bucket in zip((0.2, 0.4, 0.6, 0.8), SCORE_BUCKETS):
        if score < upper:
            return bucket
    return SCORE_BUCKETS[-1]
