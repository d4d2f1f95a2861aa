"""Insight scoring and prioritization."""

from insightflow.insights.prioritization import (
    AUDIENCE_RELEVANCE,
    PURPOSE_ALIGNMENT,
    InsightPrioritizationEngine,
    InsightScore,
    PrioritizationEngineFactory,
    PrioritizationResult,
    RejectedInsight,
)

__all__ = [
    "AUDIENCE_RELEVANCE",
    "PURPOSE_ALIGNMENT",
    "InsightPrioritizationEngine",
    "InsightScore",
    "PrioritizationEngineFactory",
    "PrioritizationResult",
    "RejectedInsight",
]
