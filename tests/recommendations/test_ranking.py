"""Tests for recommendation priority ranking."""

from __future__ import annotations

import pytest

from insightflow.models.enums import Difficulty, Timeframe, Urgency
from insightflow.recommendations.ranking import (
    RecommendationPrioritizer,
    is_long_term_goal,
    is_quick_win,
)


class TestPriorityScore:
    def test_weighted_score(self, make_recommendation) -> None:
        rec = make_recommendation(confidence=0.5, impact=0.5, feasibility=0.5, urgency=Urgency.HIGH)

        assert RecommendationPrioritizer().priority_score(rec) == pytest.approx(0.5)

    def test_urgency_bonus_can_be_disabled(self, make_recommendation) -> None:
        rec = make_recommendation(confidence=0.5, impact=0.5, feasibility=0.5, urgency=Urgency.URGENT)

        assert RecommendationPrioritizer(use_urgency=False).priority_score(rec) == pytest.approx(0.4)

    def test_score_clamped(self, make_recommendation) -> None:
        rec = make_recommendation(confidence=0.0, impact=0.0, feasibility=0.0, urgency=Urgency.LOW)

        assert RecommendationPrioritizer().priority_score(rec) == 0.0


class TestOrdering:
    def test_highest_first(self, make_recommendation) -> None:
        low = make_recommendation(title="low", confidence=0.2, impact=0.2)
        high = make_recommendation(title="high", confidence=0.9, impact=0.9)

        ranked = RecommendationPrioritizer().prioritize([low, high])

        assert [r.title for r in ranked] == ["high", "low"]

    def test_ties_keep_input_order(self, make_recommendation) -> None:
        recs = [make_recommendation(title=name) for name in ("a", "b", "c")]

        assert [r.title for r in RecommendationPrioritizer().prioritize(recs)] == ["a", "b", "c"]

    def test_priority_list_limited(self, make_recommendation) -> None:
        recs = [make_recommendation() for _ in range(7)]

        assert RecommendationPrioritizer.priority_recommendations(recs) == [r.id for r in recs[:5]]


class TestClassification:
    def test_quick_win(self, make_recommendation) -> None:
        rec = make_recommendation(
            difficulty=Difficulty.EASY, timeframe=Timeframe.SHORT_TERM, impact=0.7
        )
        assert is_quick_win(rec)
        assert RecommendationPrioritizer.quick_wins([rec]) == [rec.id]

    def test_low_impact_is_not_quick_win(self, make_recommendation) -> None:
        rec = make_recommendation(
            difficulty=Difficulty.EASY, timeframe=Timeframe.SHORT_TERM, impact=0.6
        )
        assert not is_quick_win(rec)

    def test_long_term_goal(self, make_recommendation) -> None:
        goal = make_recommendation(timeframe=Timeframe.LONG_TERM)
        other = make_recommendation(timeframe=Timeframe.MEDIUM_TERM)

        assert is_long_term_goal(goal)
        assert RecommendationPrioritizer.long_term_goals([goal, other]) == [goal.id]
