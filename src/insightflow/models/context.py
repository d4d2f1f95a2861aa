"""Caller-supplied context bundles, consumed read-only."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List

from insightflow.configuration.settings import ContextualFactors, UserRecommendationPreferences
from insightflow.models.enums import Audience, GenerationScope, Purpose
from insightflow.models.insight import DateRange, Insight, utc_now
from insightflow.models.recommendation import GeneratedRecommendation


@dataclass
class PrioritizationContext:
    """Why and for whom insights are being prioritized."""

    purpose: Purpose = Purpose.WEEKLY_SUMMARY
    audience: Audience = Audience.SELF
    contextual_factors: ContextualFactors = field(default_factory=ContextualFactors)


def _next_week() -> DateRange:
    now = utc_now()
    return DateRange(start=now, end=now + timedelta(days=7))


@dataclass
class RecommendationGenerationContext:
    """Inputs framing a recommendation run."""

    insights: List[Insight] = field(default_factory=list)
    user_preferences: UserRecommendationPreferences = field(
        default_factory=UserRecommendationPreferences
    )
    contextual_factors: ContextualFactors = field(default_factory=ContextualFactors)
    existing_recommendations: List[GeneratedRecommendation] = field(default_factory=list)
    timeframe: DateRange = field(default_factory=_next_week)
    scope: GenerationScope = GenerationScope.WEEKLY
