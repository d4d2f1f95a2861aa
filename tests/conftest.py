"""Shared fixtures for insightflow tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest

from insightflow.models.enums import (
    Difficulty,
    GenerationMethod,
    InsightCategory,
    InsightType,
    RecommendationType,
    Timeframe,
    Urgency,
)
from insightflow.models.insight import DateRange, Insight, InsightEvidence
from insightflow.models.recommendation import (
    ActionStep,
    GeneratedRecommendation,
    RecommendationOpportunity,
)

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


def build_insight(
    insight_id: str,
    *,
    title: str = "",
    description: str = "",
    category: InsightCategory = InsightCategory.PRODUCTIVITY,
    insight_type: InsightType = InsightType.PATTERN,
    confidence: float = 0.8,
    importance: float = 0.8,
    actionability: float = 0.7,
    novelty: float = 0.6,
    evidence_count: int = 0,
    days_ago: float = 1,
    keywords: List[str] | None = None,
) -> Insight:
    end = FIXED_NOW - timedelta(days=days_ago)
    return Insight(
        id=insight_id,
        title=title or f"Insight {insight_id}",
        description=description or f"Observation number {insight_id} about the week",
        category=category,
        type=insight_type,
        confidence=confidence,
        importance=importance,
        actionability=actionability,
        novelty=novelty,
        evidence=[
            InsightEvidence(excerpt=f"excerpt {i}", relevance_score=0.6)
            for i in range(evidence_count)
        ],
        timeframe=DateRange(start=end - timedelta(days=7), end=end),
        keywords=list(keywords or []),
    )


@pytest.fixture
def make_insight() -> Callable[..., Insight]:
    return build_insight


def build_recommendation(
    *,
    title: str = "Try a focused morning block",
    rec_type: RecommendationType = RecommendationType.ACTION,
    category: InsightCategory = InsightCategory.PRODUCTIVITY,
    sources: List[str] | None = None,
    confidence: float = 0.7,
    impact: float = 0.7,
    feasibility: float = 0.7,
    urgency: Urgency = Urgency.MEDIUM,
    difficulty: Difficulty = Difficulty.MODERATE,
    timeframe: Timeframe = Timeframe.MEDIUM_TERM,
    steps: int = 2,
) -> GeneratedRecommendation:
    return GeneratedRecommendation(
        title=title,
        description=f"{title} to make progress",
        type=rec_type,
        category=category,
        source_insights=["i1"] if sources is None else sources,
        generation_method=GenerationMethod.TEMPLATE,
        urgency=urgency,
        difficulty=difficulty,
        timeframe=timeframe,
        confidence=confidence,
        impact_potential=impact,
        feasibility_score=feasibility,
        action_steps=[
            ActionStep(id=f"step_{i}", title=f"Step {i}", description=f"Step {i}", order=i)
            for i in range(1, steps + 1)
        ],
    )


@pytest.fixture
def make_recommendation() -> Callable[..., GeneratedRecommendation]:
    return build_recommendation


@pytest.fixture
def make_opportunity() -> Callable[..., RecommendationOpportunity]:
    def _make(
        insight: Insight,
        opportunity_type: RecommendationType = RecommendationType.ACTION,
        confidence: float = 0.75,
    ) -> RecommendationOpportunity:
        return RecommendationOpportunity(
            insight=insight,
            opportunity_type=opportunity_type,
            confidence=confidence,
            reasoning="test reasoning",
            potential_impact="Moderate impact on specific areas",
        )

    return _make
