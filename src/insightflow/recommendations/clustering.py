"""Thematic clustering of generated recommendations."""

from __future__ import annotations

import logging
from collections import deque
from typing import List, Sequence

from insightflow.models.recommendation import GeneratedRecommendation, RecommendationCluster

logger = logging.getLogger(__name__)

SYNERGY_NOTE = "Recommendations can be implemented together for greater impact"


def are_related(a: GeneratedRecommendation, b: GeneratedRecommendation) -> bool:
    """Same type, same category, or at least one shared source insight."""
    return (
        a.type == b.type
        or a.category == b.category
        or bool(set(a.source_insights) & set(b.source_insights))
    )


class RecommendationClusterer:
    """Groups related recommendations.

    Relatedness is followed transitively within one pass, so recommendations
    that share a source insight always end up together even when they are
    reached through a third member. Singletons are not wrapped in clusters.
    """

    def cluster(self, recommendations: Sequence[GeneratedRecommendation]) -> List[RecommendationCluster]:
        clusters: List[RecommendationCluster] = []
        unclustered = list(recommendations)

        while unclustered:
            seed = unclustered.pop(0)
            members = [seed]
            frontier = deque([seed])
            while frontier:
                current = frontier.popleft()
                related = [r for r in unclustered if are_related(current, r)]
                for recommendation in related:
                    unclustered.remove(recommendation)
                    members.append(recommendation)
                    frontier.append(recommendation)

            if len(members) > 1:
                clusters.append(self._build_cluster(members))

        logger.debug(f"Formed {len(clusters)} clusters from {len(recommendations)} recommendations")
        return clusters

    def _build_cluster(self, members: List[GeneratedRecommendation]) -> RecommendationCluster:
        return RecommendationCluster(
            theme=self.theme(members),
            recommendations=members,
            combined_impact=sum(r.impact_potential for r in members) / len(members),
            synergies=[SYNERGY_NOTE],
            conflicts=self.detect_conflicts(members),
            priority_order=[
                r.id for r in sorted(members, key=lambda r: r.confidence, reverse=True)
            ],
        )

    @staticmethod
    def theme(members: Sequence[GeneratedRecommendation]) -> str:
        types = {r.type for r in members}
        if len(types) == 1:
            return f"{next(iter(types)).value} recommendations"
        categories = {r.category for r in members}
        if len(categories) == 1:
            return f"{next(iter(categories)).value} improvements"
        return "Related recommendations"

    @staticmethod
    def detect_conflicts(members: Sequence[GeneratedRecommendation]) -> List[str]:
        # Extension point: no conflict analysis is performed yet, so an empty
        # list does not mean the members are known to be compatible.
        return []
