"""Insight Prioritization Engine.

Selects a bounded, diverse, de-duplicated subset of insights for a review.

Pipeline (each step optional where the config says so):
1. Initial filtering on confidence/importance/actionability/novelty/evidence
2. Weighted multi-criteria scoring
3. Diversity boost for under-represented categories and types
4. Contextual relevance boost from purpose and audience tables
5. Redundancy filtering on composite text similarity
6. Category balancing, then type balancing
7. Final top-N selection and ranking

Data-quality problems never raise: every drop is explained in ``warnings``
or in a per-insight ``rejection_reason``. Only unexpected internal failures
surface, wrapped in :class:`PrioritizationError`.

Example Usage:
    engine = PrioritizationEngineFactory.create_for_daily_review()
    result = engine.prioritize_insights(insights, PrioritizationContext(purpose=Purpose.DAILY_REVIEW))
    for insight in result.selected_insights:
        print(insight.title)
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from insightflow.configuration.settings import (
    PrioritizationConfig,
    PriorityWeighting,
    build_prioritization_config,
)
from insightflow.errors import InsightflowError, PrioritizationError
from insightflow.insights.scoring import (
    SCORE_BUCKETS,
    evidence_quality_score,
    frequency_score,
    insight_similarity,
    recency_score,
    score_bucket,
    shannon_diversity,
)
from insightflow.models.context import PrioritizationContext
from insightflow.models.enums import Audience, InsightCategory, InsightType, Purpose, ensure_covered
from insightflow.models.insight import Insight, utc_now

logger = logging.getLogger(__name__)


NEUTRAL_RELEVANCE = 0.5
DEFAULT_REJECTION_REASON = "Below selection threshold"

_C = InsightCategory
_T = InsightType

PURPOSE_ALIGNMENT: Dict[Purpose, Dict[InsightCategory, float]] = {
    Purpose.DAILY_REVIEW: ensure_covered({
        _C.PRODUCTIVITY: 0.9, _C.HABITS: 0.8, _C.GOALS: 0.7, _C.WELLBEING: 0.6,
        _C.CHALLENGES: 0.8, _C.ACHIEVEMENTS: 0.9, _C.LEARNING: 0.5, _C.RELATIONSHIPS: 0.4,
        _C.OPPORTUNITIES: 0.6, _C.PATTERNS: 0.7, _C.TRENDS: 0.5, _C.CONCERNS: 0.8,
    }, InsightCategory, "daily-review alignment"),
    Purpose.WEEKLY_SUMMARY: ensure_covered({
        _C.PRODUCTIVITY: 0.8, _C.HABITS: 0.9, _C.GOALS: 0.9, _C.WELLBEING: 0.7,
        _C.CHALLENGES: 0.7, _C.ACHIEVEMENTS: 0.8, _C.LEARNING: 0.7, _C.RELATIONSHIPS: 0.6,
        _C.OPPORTUNITIES: 0.8, _C.PATTERNS: 0.9, _C.TRENDS: 0.8, _C.CONCERNS: 0.6,
    }, InsightCategory, "weekly-summary alignment"),
    Purpose.MONTHLY_REPORT: ensure_covered({
        _C.PRODUCTIVITY: 0.7, _C.HABITS: 0.6, _C.GOALS: 0.9, _C.WELLBEING: 0.8,
        _C.CHALLENGES: 0.6, _C.ACHIEVEMENTS: 0.9, _C.LEARNING: 0.8, _C.RELATIONSHIPS: 0.7,
        _C.OPPORTUNITIES: 0.9, _C.PATTERNS: 0.8, _C.TRENDS: 0.9, _C.CONCERNS: 0.5,
    }, InsightCategory, "monthly-report alignment"),
    Purpose.PROJECT_REVIEW: ensure_covered({
        _C.PRODUCTIVITY: 0.9, _C.HABITS: 0.4, _C.GOALS: 0.8, _C.WELLBEING: 0.3,
        _C.CHALLENGES: 0.9, _C.ACHIEVEMENTS: 0.8, _C.LEARNING: 0.9, _C.RELATIONSHIPS: 0.5,
        _C.OPPORTUNITIES: 0.8, _C.PATTERNS: 0.6, _C.TRENDS: 0.7, _C.CONCERNS: 0.8,
    }, InsightCategory, "project-review alignment"),
}

AUDIENCE_RELEVANCE: Dict[Audience, Dict[InsightType, float]] = {
    Audience.SELF: ensure_covered({
        _T.OBSERVATION: 0.8, _T.CORRELATION: 0.7, _T.CAUSATION: 0.8, _T.PREDICTION: 0.9,
        _T.RECOMMENDATION: 0.9, _T.WARNING: 0.9, _T.OPPORTUNITY: 0.8, _T.ACHIEVEMENT: 0.7,
        _T.PATTERN: 0.8, _T.ANOMALY: 0.6,
    }, InsightType, "self relevance"),
    Audience.TEAM: ensure_covered({
        _T.OBSERVATION: 0.6, _T.CORRELATION: 0.8, _T.CAUSATION: 0.7, _T.PREDICTION: 0.8,
        _T.RECOMMENDATION: 0.9, _T.WARNING: 0.8, _T.OPPORTUNITY: 0.9, _T.ACHIEVEMENT: 0.8,
        _T.PATTERN: 0.7, _T.ANOMALY: 0.5,
    }, InsightType, "team relevance"),
    Audience.MANAGER: ensure_covered({
        _T.OBSERVATION: 0.5, _T.CORRELATION: 0.6, _T.CAUSATION: 0.7, _T.PREDICTION: 0.9,
        _T.RECOMMENDATION: 0.8, _T.WARNING: 0.9, _T.OPPORTUNITY: 0.9, _T.ACHIEVEMENT: 0.9,
        _T.PATTERN: 0.6, _T.ANOMALY: 0.7,
    }, InsightType, "manager relevance"),
}


@dataclass
class InsightScore:
    """Scoring breakdown for one insight within a single run."""

    insight_id: str
    category: InsightCategory
    type: InsightType
    total_score: float = 0.0

    confidence_score: float = 0.0
    importance_score: float = 0.0
    actionability_score: float = 0.0
    novelty_score: float = 0.0
    recency_score: float = 0.0
    frequency_score: float = 0.0
    evidence_score: float = 0.0
    diversity_score: float = 0.0
    contextual_score: float = 0.0

    weighted_confidence: float = 0.0
    weighted_importance: float = 0.0
    weighted_actionability: float = 0.0
    weighted_novelty: float = 0.0
    weighted_recency: float = 0.0
    weighted_frequency: float = 0.0

    rank: int = 0
    selected: bool = False
    rejection_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insight_id": self.insight_id,
            "category": self.category.value,
            "type": self.type.value,
            "total_score": self.total_score,
            "confidence_score": self.confidence_score,
            "importance_score": self.importance_score,
            "actionability_score": self.actionability_score,
            "novelty_score": self.novelty_score,
            "recency_score": self.recency_score,
            "frequency_score": self.frequency_score,
            "evidence_score": self.evidence_score,
            "diversity_score": self.diversity_score,
            "contextual_score": self.contextual_score,
            "weighted_scores": {
                "confidence": self.weighted_confidence,
                "importance": self.weighted_importance,
                "actionability": self.weighted_actionability,
                "novelty": self.weighted_novelty,
                "recency": self.weighted_recency,
                "frequency": self.weighted_frequency,
            },
            "rank": self.rank,
            "selected": self.selected,
            "rejection_reason": self.rejection_reason,
        }


@dataclass
class RejectedInsight:
    insight: Insight
    score: InsightScore
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insight_id": self.insight.id,
            "title": self.insight.title,
            "total_score": self.score.total_score,
            "reason": self.reason,
        }


@dataclass
class PrioritizationResult:
    """Outcome of one prioritization run.

    ``processing_time`` is in milliseconds. Distributions and averages are
    computed over the selected insights; ``score_distribution`` covers every
    scored insight.
    """

    selected_insights: List[Insight]
    all_scores: List[InsightScore]
    rejected_insights: List[RejectedInsight]
    total_insights_analyzed: int
    average_score: float
    score_distribution: Dict[str, int]
    category_distribution: Dict[str, int]
    type_distribution: Dict[str, int]
    average_confidence: float
    average_importance: float
    average_actionability: float
    diversity_index: float
    processing_time: float
    config_used: PrioritizationConfig
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_insights": [i.to_dict() for i in self.selected_insights],
            "all_scores": [s.to_dict() for s in self.all_scores],
            "rejected_insights": [r.to_dict() for r in self.rejected_insights],
            "total_insights_analyzed": self.total_insights_analyzed,
            "average_score": self.average_score,
            "score_distribution": dict(self.score_distribution),
            "category_distribution": dict(self.category_distribution),
            "type_distribution": dict(self.type_distribution),
            "average_confidence": self.average_confidence,
            "average_importance": self.average_importance,
            "average_actionability": self.average_actionability,
            "diversity_index": self.diversity_index,
            "processing_time": self.processing_time,
            "config_used": self.config_used.model_dump(mode="json"),
            "warnings": list(self.warnings),
        }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _sort_and_rank(scores: List[InsightScore]) -> List[InsightScore]:
    scores.sort(key=lambda s: s.total_score, reverse=True)
    for index, score in enumerate(scores, start=1):
        score.rank = index
    return scores


class InsightPrioritizationEngine:
    """Scores, filters, balances and selects insights.

    The engine holds only its validated configuration; each call to
    :meth:`prioritize_insights` works on fresh :class:`InsightScore` objects,
    so one engine can serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[PrioritizationConfig] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or PrioritizationConfig()
        self._clock = clock
        logger.info(
            f"InsightPrioritizationEngine initialized "
            f"(max_insights={self.config.max_insights}, "
            f"similarity_threshold={self.config.similarity_threshold})"
        )

    def get_config(self) -> PrioritizationConfig:
        return self.config.model_copy(deep=True)

    def update_config(self, overrides: Mapping[str, Any]) -> None:
        """Apply validated overrides; raises ConfigurationError on bad values."""
        self.config = build_prioritization_config(self.config, overrides)

    def prioritize_insights(
        self,
        insights: Sequence[Insight],
        context: Optional[PrioritizationContext] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> PrioritizationResult:
        """Select the most valuable insights.

        Args:
            insights: Candidate insights (never mutated)
            context: Purpose/audience bundle for contextual scoring
            options: Per-run config overrides, validated before the run

        Returns:
            PrioritizationResult with selection, scores and warnings

        Raises:
            ConfigurationError: If ``options`` is invalid
            PrioritizationError: On an unexpected internal failure
        """
        config = build_prioritization_config(self.config, options) if options else self.config
        insights = list(insights)
        context = context or PrioritizationContext()
        started = time.perf_counter()

        try:
            result = self._run(insights, context, config, started)
        except InsightflowError:
            raise
        except Exception as exc:
            logger.error(f"Insight prioritization failed for {len(insights)} insights: {exc}")
            raise PrioritizationError(
                f"Insight prioritization failed: {exc}",
                details={"insight_count": len(insights)},
            ) from exc

        logger.info(
            f"Prioritized {result.total_insights_analyzed} insights: "
            f"{len(result.selected_insights)} selected, {len(result.warnings)} warnings "
            f"in {result.processing_time:.1f}ms"
        )
        return result

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(
        self,
        insights: List[Insight],
        context: PrioritizationContext,
        config: PrioritizationConfig,
        started: float,
    ) -> PrioritizationResult:
        warnings: List[str] = []

        candidates = self._filter_initial(insights, config, warnings)
        by_id = {insight.id: insight for insight in candidates}

        now = self._clock()
        scores = _sort_and_rank([self._score(insight, config, now) for insight in candidates])

        if config.enable_diversity_boost and scores:
            self._apply_diversity_boost(scores, config)
            _sort_and_rank(scores)

        if config.enable_contextual_relevance and scores:
            self._apply_contextual_relevance(scores, context, config)
            _sort_and_rank(scores)

        remaining = list(scores)
        if config.enable_redundancy_filtering:
            remaining = self._filter_redundant(remaining, by_id, config, warnings)

        if config.enable_category_balancing:
            remaining = self._balance(
                remaining,
                key=lambda s: s.category,
                limits=config.category_limits,
                minimums=config.category_minimums,
                label="category",
                warnings=warnings,
            )
        if config.enable_type_balancing:
            remaining = self._balance(
                remaining,
                key=lambda s: s.type,
                limits=config.type_limits,
                minimums=config.type_minimums,
                label="type",
                warnings=warnings,
            )

        selected = self._select_top(remaining, config)
        selected_ids = {s.insight_id for s in selected}
        for score in scores:
            score.selected = score.insight_id in selected_ids
            if not score.selected and not score.rejection_reason:
                score.rejection_reason = DEFAULT_REJECTION_REASON
        _sort_and_rank(scores)

        return self._assemble(insights, scores, by_id, config, warnings, started)

    def _filter_initial(
        self,
        insights: List[Insight],
        config: PrioritizationConfig,
        warnings: List[str],
    ) -> List[Insight]:
        passed: List[Insight] = []
        seen: set = set()
        below_threshold = 0
        duplicates = 0

        for insight in insights:
            if insight.id in seen:
                duplicates += 1
                continue
            seen.add(insight.id)
            if self._meets_thresholds(insight, config):
                passed.append(insight)
            else:
                below_threshold += 1

        if below_threshold:
            warnings.append(
                f"Filtered out {below_threshold} insights due to threshold requirements"
            )
        if duplicates:
            warnings.append(f"Ignored {duplicates} insights with duplicate ids")
        logger.debug(f"Initial filtering kept {len(passed)} of {len(insights)} insights")
        return passed

    @staticmethod
    def _meets_thresholds(insight: Insight, config: PrioritizationConfig) -> bool:
        if insight.confidence < config.min_confidence_threshold:
            return False
        if insight.importance < config.min_importance_threshold:
            return False
        if insight.actionability < config.min_actionability_score:
            return False
        if insight.novelty < config.min_novelty_score:
            return False
        if config.require_evidence and len(insight.evidence) < config.min_evidence_count:
            return False
        return True

    def _score(self, insight: Insight, config: PrioritizationConfig, now: datetime) -> InsightScore:
        weights: PriorityWeighting = config.weights
        score = InsightScore(
            insight_id=insight.id,
            category=insight.category,
            type=insight.type,
            confidence_score=insight.confidence,
            importance_score=insight.importance,
            actionability_score=insight.actionability,
            novelty_score=insight.novelty,
            recency_score=recency_score(
                insight.timeframe.end,
                now,
                enabled=config.enable_temporal_scoring,
                decay_factor=config.recency_decay_factor,
                window_days=config.temporal_window_days,
            ),
            frequency_score=frequency_score(len(insight.evidence), len(insight.related_insights)),
            evidence_score=evidence_quality_score(insight.evidence),
        )

        score.weighted_confidence = score.confidence_score * weights.confidence
        score.weighted_importance = score.importance_score * weights.impact
        score.weighted_actionability = score.actionability_score * weights.actionability
        score.weighted_novelty = score.novelty_score * weights.novelty
        score.weighted_recency = score.recency_score * weights.recency
        score.weighted_frequency = score.frequency_score * weights.frequency

        score.total_score = (
            score.weighted_confidence
            + score.weighted_importance
            + score.weighted_actionability
            + score.weighted_novelty
            + score.weighted_recency
            + score.weighted_frequency
        ) / weights.total
        return score

    @staticmethod
    def _apply_diversity_boost(scores: List[InsightScore], config: PrioritizationConfig) -> None:
        total = len(scores)
        category_counts = Counter(s.category for s in scores)
        type_counts = Counter(s.type for s in scores)
        for score in scores:
            category_diversity = 1 - category_counts[score.category] / total
            type_diversity = 1 - type_counts[score.type] / total
            score.diversity_score = (category_diversity + type_diversity) / 2
            score.total_score += score.diversity_score * config.diversity_weight

    @staticmethod
    def _apply_contextual_relevance(
        scores: List[InsightScore],
        context: PrioritizationContext,
        config: PrioritizationConfig,
    ) -> None:
        alignment = PURPOSE_ALIGNMENT.get(context.purpose, {})
        relevance = AUDIENCE_RELEVANCE.get(context.audience, {})
        for score in scores:
            purpose_alignment = alignment.get(score.category, NEUTRAL_RELEVANCE)
            audience_relevance = relevance.get(score.type, NEUTRAL_RELEVANCE)
            score.contextual_score = (purpose_alignment + audience_relevance) / 2
            score.total_score += score.contextual_score * config.context_weight

    @staticmethod
    def _filter_redundant(
        scores: List[InsightScore],
        by_id: Dict[str, Insight],
        config: PrioritizationConfig,
        warnings: List[str],
    ) -> List[InsightScore]:
        # Scores arrive sorted best-first, so the kept member of a similar pair
        # always outranks the dropped one; ties keep the first seen.
        kept: List[InsightScore] = []
        removed = 0
        for score in scores:
            insight = by_id[score.insight_id]
            similar = []
            for other in kept:
                similarity = insight_similarity(insight, by_id[other.insight_id])
                if similarity > config.similarity_threshold:
                    similar.append((similarity, other))
            if len(similar) >= config.max_similar_insights:
                similarity, closest = max(similar, key=lambda pair: pair[0])
                score.rejection_reason = (
                    f"Too similar to insight {closest.insight_id} (similarity: {similarity:.2f})"
                )
                removed += 1
                continue
            kept.append(score)

        if removed:
            warnings.append(f"Filtered out {removed} redundant insights")
        return kept

    @staticmethod
    def _balance(
        scores: List[InsightScore],
        *,
        key: Callable[[InsightScore], Any],
        limits: Mapping[Any, Optional[int]],
        minimums: Mapping[Any, int],
        label: str,
        warnings: List[str],
    ) -> List[InsightScore]:
        groups: Dict[Any, List[InsightScore]] = {}
        for score in scores:
            groups.setdefault(key(score), []).append(score)

        balanced: List[InsightScore] = []
        for group_key, group in groups.items():
            group.sort(key=lambda s: s.total_score, reverse=True)
            limit = limits.get(group_key)
            if limit is None:
                limit = len(group)
            minimum = minimums.get(group_key, 0)
            to_take = max(minimum, min(limit, len(group)))
            balanced.extend(group[:to_take])

            if to_take < len(group):
                for dropped in group[to_take:]:
                    dropped.rejection_reason = f"Exceeded {group_key.value} {label} limit ({limit})"
                warnings.append(
                    f"Limited {group_key.value} insights to {to_take} (from {len(group)})"
                )

        balanced.sort(key=lambda s: s.total_score, reverse=True)
        return balanced

    @staticmethod
    def _select_top(scores: List[InsightScore], config: PrioritizationConfig) -> List[InsightScore]:
        ordered = sorted(scores, key=lambda s: s.total_score, reverse=True)
        chosen: List[InsightScore] = []
        chosen_ids: set = set()

        # Honour configured minimums first, best-scored members of each group.
        for minimums, key in (
            (config.category_minimums, lambda s: s.category),
            (config.type_minimums, lambda s: s.type),
        ):
            for group_key, minimum in minimums.items():
                have = sum(1 for s in chosen if key(s) == group_key)
                for score in ordered:
                    if have >= minimum or len(chosen) >= config.max_insights:
                        break
                    if key(score) == group_key and score.insight_id not in chosen_ids:
                        chosen.append(score)
                        chosen_ids.add(score.insight_id)
                        have += 1

        for score in ordered:
            if len(chosen) >= config.max_insights:
                break
            if score.insight_id not in chosen_ids:
                chosen.append(score)
                chosen_ids.add(score.insight_id)

        chosen.sort(key=lambda s: s.total_score, reverse=True)
        return chosen

    @staticmethod
    def _assemble(
        insights: List[Insight],
        scores: List[InsightScore],
        by_id: Dict[str, Insight],
        config: PrioritizationConfig,
        warnings: List[str],
        started: float,
    ) -> PrioritizationResult:
        selected_scores = [s for s in scores if s.selected]
        selected = [by_id[s.insight_id] for s in selected_scores]
        rejected = [
            RejectedInsight(
                insight=by_id[s.insight_id],
                score=s,
                reason=s.rejection_reason or DEFAULT_REJECTION_REASON,
            )
            for s in scores
            if not s.selected
        ]

        distribution = {bucket: 0 for bucket in SCORE_BUCKETS}
        for score in scores:
            distribution[score_bucket(score.total_score)] += 1

        category_distribution = dict(Counter(i.category.value for i in selected))
        type_distribution = dict(Counter(i.type.value for i in selected))

        return PrioritizationResult(
            selected_insights=selected,
            all_scores=scores,
            rejected_insights=rejected,
            total_insights_analyzed=len(insights),
            average_score=_mean([s.total_score for s in selected_scores]),
            score_distribution=distribution,
            category_distribution=category_distribution,
            type_distribution=type_distribution,
            average_confidence=_mean([i.confidence for i in selected]),
            average_importance=_mean([i.importance for i in selected]),
            average_actionability=_mean([i.actionability for i in selected]),
            diversity_index=shannon_diversity(category_distribution),
            processing_time=(time.perf_counter() - started) * 1000,
            config_used=config,
            warnings=warnings,
        )


class PrioritizationEngineFactory:
    """Preset engines for common review cadences."""

    @staticmethod
    def create_for_daily_review() -> InsightPrioritizationEngine:
        return InsightPrioritizationEngine(
            build_prioritization_config(
                overrides={
                    "max_insights": 10,
                    "weights": {
                        "recency": 0.3,
                        "frequency": 0.1,
                        "confidence": 0.2,
                        "impact": 0.2,
                        "novelty": 0.1,
                        "actionability": 0.1,
                    },
                    "enable_temporal_scoring": True,
                    "temporal_window_days": 7,
                    "enable_category_balancing": True,
                    "category_limits": {
                        "productivity": 3,
                        "habits": 2,
                        "goals": 2,
                        "wellbeing": 2,
                        "challenges": 2,
                        "achievements": 2,
                        "learning": 1,
                        "relationships": 1,
                        "opportunities": 1,
                        "patterns": 2,
                        "trends": 1,
                        "concerns": 1,
                    },
                }
            )
        )

    @staticmethod
    def create_for_weekly_summary() -> InsightPrioritizationEngine:
        return InsightPrioritizationEngine(
            build_prioritization_config(
                overrides={
                    "max_insights": 15,
                    "weights": {
                        "recency": 0.2,
                        "frequency": 0.2,
                        "confidence": 0.2,
                        "impact": 0.2,
                        "novelty": 0.1,
                        "actionability": 0.1,
                    },
                    "enable_temporal_scoring": True,
                    "temporal_window_days": 14,
                    "enable_category_balancing": True,
                }
            )
        )

    @staticmethod
    def create_for_monthly_report() -> InsightPrioritizationEngine:
        return InsightPrioritizationEngine(
            build_prioritization_config(
                overrides={
                    "max_insights": 25,
                    "weights": {
                        "recency": 0.1,
                        "frequency": 0.15,
                        "confidence": 0.25,
                        "impact": 0.3,
                        "novelty": 0.1,
                        "actionability": 0.1,
                    },
                    "enable_temporal_scoring": True,
                    "temporal_window_days": 60,
                    "enable_category_balancing": True,
                    "enable_diversity_boost": True,
                    "diversity_weight": 0.15,
                }
            )
        )

    @staticmethod
    def create_for_project_review() -> InsightPrioritizationEngine:
        return InsightPrioritizationEngine(
            build_prioritization_config(
                overrides={
                    "max_insights": 20,
                    "weights": {
                        "recency": 0.15,
                        "frequency": 0.1,
                        "confidence": 0.25,
                        "impact": 0.25,
                        "novelty": 0.15,
                        "actionability": 0.1,
                    },
                    "enable_category_balancing": True,
                    "category_limits": {
                        "productivity": 5,
                        "challenges": 4,
                        "achievements": 3,
                        "learning": 3,
                        "opportunities": 3,
                        "goals": 2,
                        "habits": 1,
                        "wellbeing": 1,
                        "relationships": 1,
                        "patterns": 2,
                        "trends": 2,
                        "concerns": 3,
                    },
                }
            )
        )

    @classmethod
    def create_for_purpose(cls, purpose: Purpose) -> InsightPrioritizationEngine:
        """Preset engine matching a review purpose; custom gets defaults."""
        builders = {
            Purpose.DAILY_REVIEW: cls.create_for_daily_review,
            Purpose.WEEKLY_SUMMARY: cls.create_for_weekly_summary,
            Purpose.MONTHLY_REPORT: cls.create_for_monthly_report,
            Purpose.PROJECT_REVIEW: cls.create_for_project_review,
        }
        builder = builders.get(purpose)
        return builder() if builder else InsightPrioritizationEngine()
