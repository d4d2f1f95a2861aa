"""Tests for the insight prioritization engine."""

from __future__ import annotations

import pytest

from insightflow.configuration.settings import build_prioritization_config
from insightflow.errors import ConfigurationError, PrioritizationError
from insightflow.insights.prioritization import (
    AUDIENCE_RELEVANCE,
    PURPOSE_ALIGNMENT,
    InsightPrioritizationEngine,
    PrioritizationEngineFactory,
)
from insightflow.models.context import PrioritizationContext
from insightflow.models.enums import (
    Audience,
    InsightCategory,
    InsightType,
    Purpose,
)


def plain_engine(clock, **overrides) -> InsightPrioritizationEngine:
    """Engine with the optional boosts and balancing switched off."""
    settings = {
        "enable_diversity_boost": False,
        "enable_contextual_relevance": False,
        "enable_category_balancing": False,
        "enable_type_balancing": False,
    }
    settings.update(overrides)
    return InsightPrioritizationEngine(build_prioritization_config(overrides=settings), clock=clock)


class TestInitialFiltering:
    def test_low_confidence_filtered(self, clock, make_insight) -> None:
        """Only insights meeting the confidence threshold survive."""
        engine = plain_engine(clock, min_confidence_threshold=0.3)
        insights = [
            make_insight("A", confidence=0.9),
            make_insight("B", confidence=0.2),
        ]

        result = engine.prioritize_insights(insights)

        assert [i.id for i in result.selected_insights] == ["A"]
        assert [s.insight_id for s in result.all_scores] == ["A"]
        assert "Filtered out 1 insights due to threshold requirements" in result.warnings
        assert result.total_insights_analyzed == 2

    def test_required_evidence(self, clock, make_insight) -> None:
        engine = plain_engine(clock, require_evidence=True, min_evidence_count=2)
        insights = [make_insight("A", evidence_count=2), make_insight("B", evidence_count=1)]

        result = engine.prioritize_insights(insights)

        assert [i.id for i in result.selected_insights] == ["A"]

    def test_duplicate_ids_ignored(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        insights = [make_insight("A"), make_insight("A", confidence=0.4)]

        result = engine.prioritize_insights(insights)

        assert len(result.all_scores) == 1
        assert "Ignored 1 insights with duplicate ids" in result.warnings

    def test_empty_input(self, clock) -> None:
        result = plain_engine(clock).prioritize_insights([])

        assert result.selected_insights == []
        assert result.average_score == 0.0
        assert result.diversity_index == 0.0
        assert result.warnings == []


class TestScoringAndSelection:
    def test_selection_bounded_by_max_insights(self, clock, make_insight) -> None:
        engine = plain_engine(clock, max_insights=1, enable_redundancy_filtering=False)
        high = make_insight("high", confidence=0.95, importance=0.95)
        low = make_insight("low", confidence=0.5, importance=0.5)

        result = engine.prioritize_insights([low, high])

        assert [i.id for i in result.selected_insights] == ["high"]
        ranks = {s.insight_id: s.rank for s in result.all_scores}
        assert ranks == {"high": 1, "low": 2}
        rejected = {r.insight.id: r.reason for r in result.rejected_insights}
        assert rejected == {"low": "Below selection threshold"}

    def test_many_insights_capped(self, clock, make_insight) -> None:
        engine = plain_engine(clock, max_insights=20, enable_redundancy_filtering=False)
        insights = [make_insight(f"i{n}", confidence=0.5 + n / 100) for n in range(30)]

        result = engine.prioritize_insights(insights)

        assert len(result.selected_insights) == 20
        assert len(result.all_scores) == 30
        assert sum(result.score_distribution.values()) == 30

    def test_every_selected_insight_scored(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        insights = [make_insight(f"i{n}") for n in range(5)]

        result = engine.prioritize_insights(insights)

        scored = {s.insight_id for s in result.all_scores if s.selected}
        assert {i.id for i in result.selected_insights} == scored

    def test_recency_favours_fresher_insight(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_redundancy_filtering=False)
        fresh = make_insight("fresh", days_ago=1)
        stale = make_insight("stale", days_ago=60)

        result = engine.prioritize_insights([stale, fresh])
        scores = {s.insight_id: s for s in result.all_scores}

        assert scores["fresh"].recency_score > scores["stale"].recency_score
        assert scores["fresh"].total_score > scores["stale"].total_score
        assert result.selected_insights[0].id == "fresh"

    def test_total_score_is_weighted_mean(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_temporal_scoring=False)
        insight = make_insight(
            "x", confidence=0.8, importance=0.6, actionability=0.4, novelty=0.2
        )

        score = engine.prioritize_insights([insight]).all_scores[0]

        expected = 0.25 * 0.8 + 0.25 * 0.6 + 0.1 * 0.4 + 0.1 * 0.2 + 0.15 * 0.5 + 0.15 * 0.0
        assert score.total_score == pytest.approx(expected)
        assert score.weighted_recency == pytest.approx(0.075)

    def test_input_not_mutated(self, clock, make_insight) -> None:
        insights = [make_insight("a"), make_insight("b")]
        snapshot = [i.to_dict() for i in insights]

        plain_engine(clock).prioritize_insights(insights)

        assert [i.to_dict() for i in insights] == snapshot


class TestRedundancy:
    def test_similar_insight_rejected(self, clock, make_insight) -> None:
        engine = plain_engine(clock, similarity_threshold=0.7)
        best = make_insight(
            "best", title="Morning focus block", description="Deep work happens before noon",
            confidence=0.9,
        )
        echo = make_insight(
            "echo", title="Morning focus block", description="Deep work happens before noon",
            confidence=0.6,
        )

        result = engine.prioritize_insights([echo, best])

        assert [i.id for i in result.selected_insights] == ["best"]
        reasons = {r.insight.id: r.reason for r in result.rejected_insights}
        assert "Too similar to insight best" in reasons["echo"]
        assert "Filtered out 1 redundant insights" in result.warnings

    def test_dissimilar_insights_kept(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        result = engine.prioritize_insights(
            [
                make_insight("a", title="Sleep quality", description="Late screens hurt sleep"),
                make_insight("b", title="Budget drift", description="Takeout spending rose"),
            ]
        )

        assert len(result.selected_insights) == 2

    def test_disabled(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_redundancy_filtering=False)
        twins = [
            make_insight("a", title="Same", description="Same text"),
            make_insight("b", title="Same", description="Same text"),
        ]

        assert len(engine.prioritize_insights(twins).selected_insights) == 2

    def test_similar_group_keeps_configured_count(self, clock, make_insight) -> None:
        """Up to max_similar_insights mutually similar insights survive together."""
        engine = plain_engine(clock, similarity_threshold=0.7, max_similar_insights=2)
        triplets = [
            make_insight(insight_id, title="Morning focus block", description="Deep work happens before noon", confidence=confidence)
            for insight_id, confidence in (("a", 0.9), ("b", 0.8), ("c", 0.7))
        ]

        result = engine.prioritize_insights(triplets)

        assert [i.id for i in result.selected_insights] == ["a", "b"]
        reasons = {r.insight.id: r.reason for r in result.rejected_insights}
        assert reasons["c"].startswith("Too similar to insight a")


class TestBalancing:
    def test_category_limit(self, clock, make_insight) -> None:
        engine = plain_engine(
            clock, enable_category_balancing=True, category_limits={"productivity": 1}
        )
        insights = [make_insight(f"p{n}", confidence=0.6 + n / 10) for n in range(3)]

        result = engine.prioritize_insights(insights)

        assert [i.id for i in result.selected_insights] == ["p2"]
        assert "Limited productivity insights to 1 (from 3)" in result.warnings
        reasons = {r.insight.id: r.reason for r in result.rejected_insights}
        assert reasons["p0"] == "Exceeded productivity category limit (1)"

    def test_unlimited_category(self, clock, make_insight) -> None:
        engine = plain_engine(
            clock, enable_category_balancing=True, category_limits={"trends": None}
        )
        insights = [make_insight(f"t{n}", category=InsightCategory.TRENDS) for n in range(4)]

        assert len(engine.prioritize_insights(insights).selected_insights) == 4

    def test_default_anomaly_type_limit(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_type_balancing=True)
        insights = [
            make_insight("a1", insight_type=InsightType.ANOMALY, confidence=0.9),
            make_insight("a2", insight_type=InsightType.ANOMALY, confidence=0.7),
        ]

        result = engine.prioritize_insights(insights)

        assert [i.id for i in result.selected_insights] == ["a1"]
        assert "Limited anomaly insights to 1 (from 2)" in result.warnings

    def test_category_minimum_honoured(self, clock, make_insight) -> None:
        engine = plain_engine(clock, max_insights=1, category_minimums={"goals": 1})
        strong = make_insight("work", confidence=0.95, importance=0.95)
        weak = make_insight(
            "goal", category=InsightCategory.GOALS, confidence=0.5, importance=0.5
        )

        result = engine.prioritize_insights([strong, weak])

        assert [i.id for i in result.selected_insights] == ["goal"]


class TestContextAndDiversity:
    def test_contextual_score_uses_tables(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_contextual_relevance=True, context_weight=0.15)
        insight = make_insight("x", category=InsightCategory.HABITS, insight_type=InsightType.WARNING)
        context = PrioritizationContext(purpose=Purpose.DAILY_REVIEW, audience=Audience.MANAGER)

        score = engine.prioritize_insights([insight], context).all_scores[0]

        assert score.contextual_score == pytest.approx((0.8 + 0.9) / 2)

    def test_public_audience_is_neutral(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_contextual_relevance=True)
        context = PrioritizationContext(purpose=Purpose.CUSTOM, audience=Audience.PUBLIC)

        score = engine.prioritize_insights([make_insight("x")], context).all_scores[0]

        assert score.contextual_score == pytest.approx(0.5)

    def test_diversity_boost_favours_rare_category(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_diversity_boost=True, diversity_weight=0.5)
        insights = [
            make_insight("p1", title="Email triage"),
            make_insight("p2", title="Meeting load"),
            make_insight("r1", title="Call a friend", category=InsightCategory.RELATIONSHIPS),
        ]

        scores = {s.insight_id: s for s in engine.prioritize_insights(insights).all_scores}

        assert scores["r1"].diversity_score > scores["p1"].diversity_score

    def test_tables_cover_every_member(self) -> None:
        for table in PURPOSE_ALIGNMENT.values():
            assert set(table) == set(InsightCategory)
        for table in AUDIENCE_RELEVANCE.values():
            assert set(table) == set(InsightType)


class TestResultMetrics:
    def test_distributions_over_selection(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        insights = [
            make_insight("p", title="Inbox zero", confidence=0.9),
            make_insight("w", title="Walk more", category=InsightCategory.WELLBEING, confidence=0.7),
        ]

        result = engine.prioritize_insights(insights)

        assert result.category_distribution == {"productivity": 1, "wellbeing": 1}
        assert result.diversity_index == pytest.approx(1.0)
        assert result.average_confidence == pytest.approx(0.8)
        assert result.processing_time >= 0
        assert result.to_dict()["config_used"]["max_insights"] == 20


class TestConfiguration:
    def test_invalid_options_raise(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        with pytest.raises(ConfigurationError):
            engine.prioritize_insights([make_insight("a")], options={"max_insights": 0})

    def test_non_mapping_limits_option_raises(self, clock, make_insight) -> None:
        engine = plain_engine(clock)
        with pytest.raises(ConfigurationError):
            engine.prioritize_insights([make_insight("a")], options={"type_limits": ["x"]})

    def test_options_apply_to_single_run(self, clock, make_insight) -> None:
        engine = plain_engine(clock, enable_redundancy_filtering=False)
        insights = [make_insight(f"i{n}") for n in range(3)]

        assert len(engine.prioritize_insights(insights, options={"max_insights": 1}).selected_insights) == 1
        assert len(engine.prioritize_insights(insights).selected_insights) == 3

    def test_update_config(self, clock) -> None:
        engine = plain_engine(clock)
        engine.update_config({"max_insights": 4})

        assert engine.get_config().max_insights == 4

    def test_get_config_returns_copy(self, clock) -> None:
        engine = plain_engine(clock)
        engine.get_config().max_insights = 99

        assert engine.config.max_insights == 20

    def test_internal_failure_wrapped(self, clock, make_insight, monkeypatch) -> None:
        engine = plain_engine(clock)

        def _explode(*_args, **_kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(engine, "_score", _explode)

        with pytest.raises(PrioritizationError) as exc_info:
            engine.prioritize_insights([make_insight("a")])

        assert exc_info.value.details == {"insight_count": 1}


class TestFactory:
    def test_daily_review_preset(self) -> None:
        config = PrioritizationEngineFactory.create_for_daily_review().get_config()

        assert config.max_insights == 10
        assert config.temporal_window_days == 7
        assert config.weights.recency == 0.3
        assert config.category_limits[InsightCategory.PRODUCTIVITY] == 3

    def test_monthly_report_preset(self) -> None:
        config = PrioritizationEngineFactory.create_for_monthly_report().get_config()

        assert config.max_insights == 25
        assert config.diversity_weight == 0.15

    def test_create_for_purpose(self) -> None:
        engine = PrioritizationEngineFactory.create_for_purpose(Purpose.PROJECT_REVIEW)
        assert engine.get_config().max_insights == 20
        assert engine.get_config().category_limits[InsightCategory.CHALLENGES] == 4

        custom = PrioritizationEngineFactory.create_for_purpose(Purpose.CUSTOM)
        assert custom.get_config().max_insights == 20
