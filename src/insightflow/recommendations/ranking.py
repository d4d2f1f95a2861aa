"""Final priority ranking of recommendations."""

from __future__ import annotations

from typing import Dict, List, Sequence

from insightflow.insights.scoring import clamp
from insightflow.models.enums import Difficulty, Timeframe, Urgency, ensure_covered
from insightflow.models.recommendation import GeneratedRecommendation

URGENCY_BONUS: Dict[Urgency, float] = ensure_covered(
    {
        Urgency.URGENT: 0.2,
        Urgency.HIGH: 0.1,
        Urgency.MEDIUM: 0.0,
        Urgency.LOW: -0.1,
    },
    Urgency,
    "URGENCY_BONUS",
)

QUICK_WIN_IMPACT = 0.6
PRIORITY_LIMIT = 5


def is_quick_win(recommendation: GeneratedRecommendation) -> bool:
    return (
        recommendation.difficulty == Difficulty.EASY
        and recommendation.timeframe == Timeframe.SHORT_TERM
        and recommendation.impact_potential > QUICK_WIN_IMPACT
    )


def is_long_term_goal(recommendation: GeneratedRecommendation) -> bool:
    return recommendation.timeframe == Timeframe.LONG_TERM


class RecommendationPrioritizer:
    """Orders recommendations by a weighted priority score.

    ``priority = 0.3*confidence + 0.3*impact + 0.2*feasibility + urgency bonus``,
    clamped to [0, 1]. The urgency bonus can be switched off.
    """

    def __init__(self, *, use_urgency: bool = True) -> None:
        self.use_urgency = use_urgency

    def priority_score(self, recommendation: GeneratedRecommendation) -> float:
        score = (
            0.3 * recommendation.confidence
            + 0.3 * recommendation.impact_potential
            + 0.2 * recommendation.feasibility_score
        )
        if self.use_urgency:
            score += URGENCY_BONUS[recommendation.urgency]
        return clamp(score)

    def prioritize(
        self, recommendations: Sequence[GeneratedRecommendation]
    ) -> List[GeneratedRecommendation]:
        """Highest priority first; equal scores keep their input order."""
        return sorted(recommendations, key=self.priority_score, reverse=True)

    @staticmethod
    def priority_recommendations(
        ranked: Sequence[GeneratedRecommendation], limit: int = PRIORITY_LIMIT
    ) -> List[str]:
        return [r.id for r in ranked[:limit]]

    @staticmethod
    def quick_wins(recommendations: Sequence[GeneratedRecommendation]) -> List[str]:
        return [r.id for r in recommendations if is_quick_win(r)]

    @staticmethod
    def long_term_goals(recommendations: Sequence[GeneratedRecommendation]) -> List[str]:
        return [r.id for r in recommendations if is_long_term_goal(r)]
