"""Opportunity identification.

Mines each insight for candidate recommendation types by scanning its
description for lexical cues and mapping its category. Each candidate gets a
confidence derived from the insight plus evidence and recency bonuses.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from insightflow.insights.scoring import SECONDS_PER_DAY
from insightflow.models.enums import InsightCategory, RecommendationType
from insightflow.models.insight import Insight, ensure_aware, utc_now
from insightflow.models.recommendation import RecommendationOpportunity

logger = logging.getLogger(__name__)

RECENT_DAYS = 7

# Checked in order; an insight can match several.
CUE_PATTERNS: Tuple[Tuple[RecommendationType, Tuple[str, ...]], ...] = (
    (
        RecommendationType.ACTION,
        ("should do", "need to", "could try", "might consider", "action required",
         "next step", "implement", "execute"),
    ),
    (
        RecommendationType.HABIT,
        ("regularly", "daily", "weekly", "routine", "habit", "consistently",
         "practice", "maintain", "develop"),
    ),
    (
        RecommendationType.DECISION,
        ("decide", "choice", "option", "alternative", "consider", "evaluate",
         "weigh", "determine", "select"),
    ),
    (
        RecommendationType.LEARNING,
        ("learn", "study", "research", "understand", "explore", "investigate",
         "skill", "knowledge", "training"),
    ),
    (
        RecommendationType.OPTIMIZATION,
        ("improve", "optimize", "enhance", "streamline", "efficiency", "better",
         "faster", "easier", "automate"),
    ),
)

CATEGORY_TYPES: Dict[InsightCategory, RecommendationType] = {
    InsightCategory.WELLBEING: RecommendationType.HEALTH,
    InsightCategory.PRODUCTIVITY: RecommendationType.PRODUCTIVITY,
    InsightCategory.GOALS: RecommendationType.CAREER,
    InsightCategory.LEARNING: RecommendationType.REFLECTION,
}

REASONING_TEMPLATES: Dict[RecommendationType, str] = {
    RecommendationType.ACTION: (
        'Based on the pattern "{description}", there\'s an opportunity to take '
        "specific action to address this area."
    ),
    RecommendationType.HABIT: (
        'The recurring nature of "{description}" suggests an opportunity to '
        "develop or modify habits."
    ),
    RecommendationType.DECISION: (
        'The insight "{description}" indicates a decision point that could '
        "benefit from structured evaluation."
    ),
    RecommendationType.LEARNING: (
        'The pattern "{description}" reveals a knowledge gap that could be '
        "addressed through learning."
    ),
    RecommendationType.OPTIMIZATION: (
        'The insight "{description}" suggests an opportunity to improve or '
        "optimize current approaches."
    ),
}
DEFAULT_REASONING = 'The insight "{description}" presents an opportunity for {type}-related improvement.'

BASE_ACTIONS = (
    "Analyze the current situation",
    "Set specific goals",
    "Create an action plan",
    "Track progress regularly",
)

TYPE_ACTIONS: Dict[RecommendationType, Tuple[str, ...]] = {
    RecommendationType.HABIT: (
        "Start with small changes",
        "Use habit stacking",
        "Set up environmental cues",
    ),
    RecommendationType.LEARNING: (
        "Identify learning resources",
        "Set aside dedicated time",
        "Find a mentor or community",
    ),
    RecommendationType.OPTIMIZATION: (
        "Measure current performance",
        "Identify bottlenecks",
        "Test improvements",
    ),
}


def identify_opportunity_types(insight: Insight) -> List[RecommendationType]:
    """Recommendation types suggested by an insight, without duplicates."""
    content = insight.description.lower()
    types: List[RecommendationType] = [
        opportunity_type
        for opportunity_type, cues in CUE_PATTERNS
        if any(cue in content for cue in cues)
    ]
    category_type = CATEGORY_TYPES.get(insight.category)
    if category_type is not None:
        types.append(category_type)
    return list(dict.fromkeys(types))


def describe_potential_impact(importance: float) -> str:
    if importance > 0.8:
        return "High potential impact on overall well-being and productivity"
    if importance > 0.6:
        return "Moderate potential impact with noticeable improvements"
    if importance > 0.4:
        return "Some potential impact in specific areas"
    return "Limited but meaningful impact"


class OpportunityIdentifier:
    """Turns insights into recommendation opportunities."""

    def __init__(
        self,
        min_confidence_threshold: float = 0.3,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.min_confidence_threshold = min_confidence_threshold
        self._clock = clock

    def identify(self, insights: Iterable[Insight]) -> List[RecommendationOpportunity]:
        """Opportunities for every insight, deduplicated by (insight, type)."""
        now = self._clock()
        opportunities: List[RecommendationOpportunity] = []
        for insight in insights:
            opportunities.extend(self.analyze(insight, now=now))
        deduplicated = self.deduplicate(opportunities)
        logger.debug(f"Identified {len(deduplicated)} opportunities")
        return deduplicated

    def analyze(self, insight: Insight, *, now: datetime | None = None) -> List[RecommendationOpportunity]:
        now = now or self._clock()
        opportunities = []
        for opportunity_type in identify_opportunity_types(insight):
            confidence = self.opportunity_confidence(insight, now)
            if confidence < self.min_confidence_threshold:
                continue
            opportunities.append(
                RecommendationOpportunity(
                    insight=insight,
                    opportunity_type=opportunity_type,
                    confidence=confidence,
                    reasoning=self._reasoning(insight, opportunity_type),
                    suggested_actions=[*BASE_ACTIONS, *TYPE_ACTIONS.get(opportunity_type, ())],
                    potential_impact=describe_potential_impact(insight.importance),
                    implementation_notes=(
                        "Consider your current context and available resources when "
                        f'implementing changes related to "{insight.description}".'
                    ),
                )
            )
        return opportunities

    @staticmethod
    def opportunity_confidence(insight: Insight, now: datetime) -> float:
        confidence = insight.confidence
        if len(insight.evidence) > 2:
            confidence += 0.1
        if len(insight.evidence) > 3:
            confidence += 0.1
        days_since_end = (ensure_aware(now) - insight.timeframe.end).total_seconds() / SECONDS_PER_DAY
        if days_since_end <= RECENT_DAYS:
            confidence += 0.1
        return min(1.0, confidence)

    @staticmethod
    def deduplicate(
        opportunities: Sequence[RecommendationOpportunity],
    ) -> List[RecommendationOpportunity]:
        seen = set()
        unique = []
        for opportunity in opportunities:
            key = (opportunity.insight_id, opportunity.opportunity_type)
            if key in seen:
                continue
            seen.add(key)
            unique.append(opportunity)
        return unique

    @staticmethod
    def _reasoning(insight: Insight, opportunity_type: RecommendationType) -> str:
        template = REASONING_TEMPLATES.get(opportunity_type, DEFAULT_REASONING)
        return template.format(description=insight.description, type=opportunity_type.value)
