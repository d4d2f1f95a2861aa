"""Tests for recommendation clustering."""

from __future__ import annotations

import pytest

from insightflow.models.enums import InsightCategory, RecommendationType
from insightflow.recommendations.clustering import SYNERGY_NOTE, RecommendationClusterer


class TestClusterer:
    def test_unrelated_recommendations_stay_unclustered(self, make_recommendation) -> None:
        recs = [
            make_recommendation(rec_type=RecommendationType.ACTION, category=InsightCategory.PRODUCTIVITY, sources=["a"]),
            make_recommendation(rec_type=RecommendationType.HABIT, category=InsightCategory.WELLBEING, sources=["b"]),
        ]

        assert RecommendationClusterer().cluster(recs) == []

    def test_same_type_clustered(self, make_recommendation) -> None:
        first = make_recommendation(category=InsightCategory.PRODUCTIVITY, sources=["a"], confidence=0.5, impact=0.4)
        second = make_recommendation(category=InsightCategory.WELLBEING, sources=["b"], confidence=0.9, impact=0.8)

        clusters = RecommendationClusterer().cluster([first, second])

        assert len(clusters) == 1
        cluster = clusters[0]
        assert cluster.theme == "action recommendations"
        assert cluster.combined_impact == pytest.approx(0.6)
        assert cluster.priority_order == [second.id, first.id]
        assert cluster.synergies == [SYNERGY_NOTE]
        assert cluster.conflicts == []

    def test_shared_source_members_end_up_together(self, make_recommendation) -> None:
        """Members linked through a third recommendation land in one cluster."""
        a = make_recommendation(rec_type=RecommendationType.ACTION, category=InsightCategory.PRODUCTIVITY, sources=["x"])
        b = make_recommendation(rec_type=RecommendationType.HABIT, category=InsightCategory.WELLBEING, sources=["y"])
        bridge = make_recommendation(rec_type=RecommendationType.LEARNING, category=InsightCategory.GOALS, sources=["x", "y"])

        clusters = RecommendationClusterer().cluster([a, b, bridge])

        assert len(clusters) == 1
        assert {r.id for r in clusters[0].recommendations} == {a.id, b.id, bridge.id}
        assert clusters[0].theme == "Related recommendations"

    def test_category_theme(self, make_recommendation) -> None:
        recs = [
            make_recommendation(rec_type=RecommendationType.ACTION, category=InsightCategory.WELLBEING, sources=["a"]),
            make_recommendation(rec_type=RecommendationType.HABIT, category=InsightCategory.WELLBEING, sources=["b"]),
        ]

        assert RecommendationClusterer().cluster(recs)[0].theme == "wellbeing improvements"

    def test_each_recommendation_in_at_most_one_cluster(self, make_recommendation) -> None:
        recs = [make_recommendation(sources=[f"s{n}"]) for n in range(5)]

        clusters = RecommendationClusterer().cluster(recs)
        member_ids = [r.id for cluster in clusters for r in cluster.recommendations]

        assert len(member_ids) == len(set(member_ids)) == 5
