"""Recommendation Generation Pipeline.

Turns insights into a ranked set of actionable recommendations:

1. Identify opportunities (lexical cues and category mapping)
2. Filter them (excluded types, confidence, budget)
3. Generate one recommendation per opportunity, by AI completion or template
4. Validate, re-assess feasibility and impact, drop duplicates
5. Cluster related recommendations and rank the final list

AI calls run concurrently behind a semaphore and an optional overall
deadline. When an AI call fails, times out, or returns malformed output the
opportunity falls back to the best matching template if fallback is
enabled. Opportunities still pending at the deadline are cancelled and fall
back to templates. Any other problem is reported in ``warnings``; a failure
of the run as a whole yields a zero-valued result instead of an exception.

Example Usage:
    generator = RecommendationGenerator(ai=my_capability)
    result = await generator.generate_recommendations(insights, context)
    for rec in result.recommendations:
        print(rec.title, rec.generation_method.value)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from insightflow.configuration.settings import (
    RecommendationGenerationConfig,
    build_generation_config,
)
from insightflow.errors import (
    GenerationError,
    InsightflowError,
    ParsingError,
    RecommendationError,
    ValidationError,
)
from insightflow.insights.scoring import clamp
from insightflow.models.context import RecommendationGenerationContext
from insightflow.models.enums import (
    Difficulty,
    GenerationMethod,
    GenerationScope,
    RecommendationType,
    Timeframe,
    Urgency,
    ensure_covered,
)
from insightflow.models.insight import DateRange, Insight, utc_now
from insightflow.models.recommendation import (
    ActionStep,
    GeneratedRecommendation,
    RecommendationEvidence,
    RecommendationGenerationResult,
    RecommendationOpportunity,
    RecommendationTemplate,
    TemplateVariation,
)
from insightflow.recommendations.ai import (
    AIRecommendationPayload,
    CompletionCapability,
    build_recommendation_prompt,
    parse_ai_response,
)
from insightflow.recommendations.clustering import RecommendationClusterer
from insightflow.recommendations.opportunities import OpportunityIdentifier
from insightflow.recommendations.ranking import RecommendationPrioritizer
from insightflow.recommendations.templates import TemplateRegistry, fill_template
from insightflow.recommendations.validation import RecommendationValidator

logger = logging.getLogger(__name__)

ConfigInput = Union[RecommendationGenerationConfig, Mapping[str, Any], None]


TIMEFRAME_BY_TYPE: Dict[RecommendationType, Timeframe] = ensure_covered(
    {
        RecommendationType.ACTION: Timeframe.SHORT_TERM,
        RecommendationType.HABIT: Timeframe.MEDIUM_TERM,
        RecommendationType.LEARNING: Timeframe.LONG_TERM,
        RecommendationType.DECISION: Timeframe.MEDIUM_TERM,
        RecommendationType.OPTIMIZATION: Timeframe.MEDIUM_TERM,
        RecommendationType.HEALTH: Timeframe.MEDIUM_TERM,
        RecommendationType.CAREER: Timeframe.MEDIUM_TERM,
        RecommendationType.PRODUCTIVITY: Timeframe.MEDIUM_TERM,
        RecommendationType.REFLECTION: Timeframe.MEDIUM_TERM,
        RecommendationType.GOAL: Timeframe.MEDIUM_TERM,
        RecommendationType.INVESTIGATION: Timeframe.MEDIUM_TERM,
        RecommendationType.PREVENTION: Timeframe.MEDIUM_TERM,
        RecommendationType.RELATIONSHIP: Timeframe.MEDIUM_TERM,
        RecommendationType.CREATIVE: Timeframe.MEDIUM_TERM,
        RecommendationType.FINANCIAL: Timeframe.MEDIUM_TERM,
    },
    RecommendationType,
    "TIMEFRAME_BY_TYPE",
)

DIFFICULTY_FEASIBILITY: Dict[Difficulty, float] = ensure_covered(
    {
        Difficulty.EASY: 0.3,
        Difficulty.MODERATE: 0.1,
        Difficulty.CHALLENGING: -0.1,
        Difficulty.COMPLEX: -0.3,
    },
    Difficulty,
    "DIFFICULTY_FEASIBILITY",
)

TIME_FEASIBILITY: Dict[str, float] = {"flexible": 0.2, "moderate": 0.0, "limited": -0.2}

URGENCY_IMPACT: Dict[Urgency, float] = ensure_covered(
    {Urgency.URGENT: 0.2, Urgency.HIGH: 0.1, Urgency.MEDIUM: 0.0, Urgency.LOW: -0.1},
    Urgency,
    "URGENCY_IMPACT",
)

TIMEFRAME_DAYS: Dict[Timeframe, int] = ensure_covered(
    {
        Timeframe.IMMEDIATE: 1,
        Timeframe.SHORT_TERM: 30,
        Timeframe.MEDIUM_TERM: 90,
        Timeframe.LONG_TERM: 365,
    },
    Timeframe,
    "TIMEFRAME_DAYS",
)

STRATEGIC_TYPES = frozenset(
    {RecommendationType.GOAL, RecommendationType.LEARNING, RecommendationType.OPTIMIZATION}
)
QUICK_WIN_CONFIDENCE = 0.7

DEFAULT_RISKS = (
    "May require significant time investment",
    "Results may vary based on individual circumstances",
)
DEFAULT_PREREQUISITES = (
    "Clear understanding of current situation",
    "Commitment to follow through",
)
DEFAULT_ALTERNATIVES = (
    "Consider a gradual approach",
    "Seek support from others",
    "Start with a smaller scope",
)
DEFAULT_SUCCESS_METRICS = (
    "Measurable improvement in target area",
    "Consistent implementation of action steps",
)
DEFAULT_TRACKING_METHODS = (
    "Weekly progress reviews",
    "Objective measurement tools",
    "Feedback from others",
)
DEFAULT_REVIEW_TIMEFRAME = "2 weeks"
DEFAULT_FEASIBILITY = 0.7
STEP_ESTIMATE = "30 minutes"

# Template variables resolved from the insight; anything else declared by a
# template falls back to the topic.
TOPIC_VARIABLES = frozenset({
    "insight_topic", "habit_type", "skill_area", "skill_name", "process_name",
    "technique_name", "stress_technique", "sleep_strategy", "target_area", "goal_type",
})
DESCRIPTION_VARIABLES = frozenset({
    "insight_description", "current_problem", "stress_trigger", "sleep_issue",
})
OUTCOME_VARIABLES = frozenset({
    "suggested_outcome", "expected_outcome", "benefit", "improvement_goal",
    "expected_benefit", "career_goal", "time_savings",
})
CATEGORY_VARIABLES = frozenset({"focus_area", "insight_area", "quality_metric"})
SCOPE_VARIABLES = frozenset({"reflection_type"})

VariationCondition = Callable[[RecommendationOpportunity, RecommendationGenerationContext], bool]

VARIATION_CONDITIONS: Dict[str, VariationCondition] = {
    "high_stress": lambda opp, ctx: ctx.contextual_factors.current_stress_level == "high",
    "low_stress": lambda opp, ctx: ctx.contextual_factors.current_stress_level == "low",
    "limited_time": lambda opp, ctx: ctx.contextual_factors.available_time == "limited",
    "flexible_time": lambda opp, ctx: ctx.contextual_factors.available_time == "flexible",
    "high_confidence": lambda opp, ctx: opp.confidence > 0.8,
    "low_confidence": lambda opp, ctx: opp.confidence < 0.5,
}


def extract_template_variables(
    opportunity: RecommendationOpportunity,
    template: RecommendationTemplate,
    context: Optional[RecommendationGenerationContext] = None,
) -> Dict[str, str]:
    """Values for the base placeholders plus every variable the template declares."""
    description = opportunity.insight.description
    topic = " ".join(description.split()[:3])
    outcome = opportunity.potential_impact
    scope = context.scope.value if context is not None else GenerationScope.WEEKLY.value

    variables = {
        "insight_topic": topic,
        "insight_description": description,
        "suggested_outcome": outcome,
    }
    for name in template.variables:
        if name in variables:
            continue
        if name in DESCRIPTION_VARIABLES:
            variables[name] = description
        elif name in OUTCOME_VARIABLES:
            variables[name] = outcome
        elif name in CATEGORY_VARIABLES:
            variables[name] = opportunity.insight.category.value
        elif name in SCOPE_VARIABLES:
            variables[name] = scope
        else:
            variables[name] = topic
    return variables


def select_template_variation(
    template: RecommendationTemplate,
    opportunity: RecommendationOpportunity,
    context: Optional[RecommendationGenerationContext],
) -> Optional[TemplateVariation]:
    """First variation whose condition holds; unknown conditions never match."""
    if context is None:
        return None
    for variation in template.variations:
        condition = VARIATION_CONDITIONS.get(variation.condition)
        if condition is not None and condition(opportunity, context):
            return variation
    return None


def urgency_for(confidence: float) -> Urgency:
    if confidence > 0.8:
        return Urgency.HIGH
    if confidence > 0.6:
        return Urgency.MEDIUM
    return Urgency.LOW


def difficulty_for(step_count: int) -> Difficulty:
    if step_count <= 2:
        return Difficulty.EASY
    if step_count <= 4:
        return Difficulty.MODERATE
    if step_count <= 6:
        return Difficulty.CHALLENGING
    return Difficulty.COMPLEX


def build_action_steps(descriptions: Sequence[str]) -> List[ActionStep]:
    """Ordered steps, each depending on the one before it."""
    return [
        ActionStep(
            id=f"step_{index}",
            title=text,
            description=text,
            order=index,
            estimated_time=STEP_ESTIMATE,
            dependencies=[f"step_{index - 1}"] if index > 1 else [],
        )
        for index, text in enumerate(descriptions, start=1)
    ]


def extract_evidence(opportunity: RecommendationOpportunity) -> List[RecommendationEvidence]:
    return [
        RecommendationEvidence(
            insight_id=opportunity.insight_id,
            excerpt=item.excerpt,
            relevance_score=item.relevance_score,
            support_type="direct",
            file_path=item.document_path,
            timestamp=item.timestamp,
        )
        for item in opportunity.insight.evidence
    ]


def _normalized_title(recommendation: GeneratedRecommendation) -> str:
    return " ".join(recommendation.title.lower().split())


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class RecommendationGenerator:
    """Hybrid template/AI recommendation pipeline.

    Args:
        config: Generation settings (defaults when omitted)
        registry: Template registry; a fresh one with the default templates
            is created when omitted
        ai: Optional completion capability used by the AI strategy
    """

    def __init__(
        self,
        config: Optional[RecommendationGenerationConfig] = None,
        *,
        registry: Optional[TemplateRegistry] = None,
        ai: Optional[CompletionCapability] = None,
        validator: Optional[RecommendationValidator] = None,
        clusterer: Optional[RecommendationClusterer] = None,
        prioritizer: Optional[RecommendationPrioritizer] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or RecommendationGenerationConfig()
        self.registry = registry if registry is not None else TemplateRegistry()
        self.ai = ai
        self.validator = validator or RecommendationValidator()
        self.clusterer = clusterer or RecommendationClusterer()
        self.prioritizer = prioritizer
        self._clock = clock
        self.identifier = OpportunityIdentifier(self.config.min_confidence_threshold, clock=clock)
        logger.info(
            f"RecommendationGenerator initialized "
            f"(templates={len(self.registry)}, ai={'on' if ai is not None else 'off'}, "
            f"max_recommendations={self.config.max_recommendations})"
        )

    # ------------------------------------------------------------------
    # Configuration and templates
    # ------------------------------------------------------------------

    def get_config(self) -> RecommendationGenerationConfig:
        return self.config.model_copy(deep=True)

    def update_config(self, overrides: Mapping[str, Any]) -> None:
        """Apply validated overrides; raises ConfigurationError on bad values."""
        self.config = build_generation_config(self.config, overrides)
        self.identifier.min_confidence_threshold = self.config.min_confidence_threshold

    def set_completion_capability(self, ai: Optional[CompletionCapability]) -> None:
        self.ai = ai

    def add_template(self, template: RecommendationTemplate) -> None:
        self.registry.register(template)

    def remove_template(self, template_id: str) -> bool:
        return self.registry.remove(template_id)

    def get_templates(self) -> List[RecommendationTemplate]:
        return self.registry.templates()

    # ------------------------------------------------------------------
    # Main pipeline
    # ------------------------------------------------------------------

    async def generate_recommendations(
        self,
        insights: Sequence[Insight],
        context: Optional[RecommendationGenerationContext] = None,
        config: ConfigInput = None,
        *,
        deadline: Optional[float] = None,
    ) -> RecommendationGenerationResult:
        """Run the full pipeline.

        Args:
            insights: Insights to mine, typically the prioritization selection
            context: Generation context; built from the config when omitted
            config: Per-run config or overrides, validated before the run
            deadline: Overall time budget in seconds for AI generation

        Returns:
            RecommendationGenerationResult; never raises for run failures

        Raises:
            ConfigurationError: If ``config`` overrides are invalid
        """
        effective = self._resolve_config(config)
        insights = list(insights)
        context = context or self._default_context(insights, effective)
        started = time.perf_counter()

        try:
            warnings: List[str] = []
            opportunities = self.identify_opportunities(insights, effective)
            selected = self.filter_opportunities(opportunities, effective)

            generated = await self._generate_all(selected, context, effective, deadline, warnings)
            accepted = self._validate_and_enhance(
                generated, context.insights or insights, context, effective, warnings
            )
            if effective.enable_duplicate_detection:
                accepted = self._remove_duplicates(accepted, context, warnings)
            accepted = accepted[: effective.max_recommendations]

            clusters = self.clusterer.cluster(accepted)
            prioritizer = self._prioritizer_for(effective)
            ranked = prioritizer.prioritize(accepted)

            result = self._build_result(
                ranked, clusters, opportunities, selected, prioritizer, warnings, started
            )
        except Exception as exc:
            logger.error(f"Recommendation generation failed: {exc}")
            return self._error_result(exc, started)

        logger.info(
            f"Generated {result.recommendations_generated} recommendations from "
            f"{result.opportunities_processed} opportunities in {result.generation_time:.1f}ms"
        )
        return result

    def identify_opportunities(
        self,
        insights: Sequence[Insight],
        config: Optional[RecommendationGenerationConfig] = None,
    ) -> List[RecommendationOpportunity]:
        config = config or self.config
        identifier = self.identifier
        if identifier.min_confidence_threshold != config.min_confidence_threshold:
            identifier = OpportunityIdentifier(config.min_confidence_threshold, clock=self._clock)
        return identifier.identify(insights)

    @staticmethod
    def filter_opportunities(
        opportunities: Sequence[RecommendationOpportunity],
        config: RecommendationGenerationConfig,
    ) -> List[RecommendationOpportunity]:
        """Drop excluded/low-confidence opportunities and cap the count.

        With ``balance_by_category`` the survivors are interleaved across
        insight categories before the cap so one category cannot use the
        whole budget.
        """
        excluded = set(config.exclude_types)
        eligible = [
            opp
            for opp in opportunities
            if opp.opportunity_type not in excluded
            and opp.confidence >= config.min_confidence_threshold
        ]
        if config.balance_by_category:
            eligible = _interleave_by_category(eligible)
        return eligible[: config.max_recommendations]

    # ------------------------------------------------------------------
    # Generation strategies
    # ------------------------------------------------------------------

    def generate_with_template(
        self,
        opportunity: RecommendationOpportunity,
        template: RecommendationTemplate,
        context: Optional[RecommendationGenerationContext] = None,
        config: Optional[RecommendationGenerationConfig] = None,
    ) -> GeneratedRecommendation:
        """Fill a template for one opportunity."""
        config = config or self.config
        variables = extract_template_variables(opportunity, template, context)
        variation = select_template_variation(template, opportunity, context)

        title = (variation.title_variation if variation else None) or template.title_template
        description = (
            (variation.description_variation if variation else None) or template.description_template
        )
        step_texts = (
            (variation.action_steps_variation if variation else None) or template.action_steps_template
        )
        directness = (
            (variation.directness_adjustment if variation else None)
            or config.user_preferences.preferred_directness
        )

        return GeneratedRecommendation(
            title=fill_template(title, variables),
            description=fill_template(description, variables),
            type=template.type,
            category=opportunity.insight.category,
            source_insights=[opportunity.insight_id],
            generation_method=GenerationMethod.TEMPLATE,
            urgency=urgency_for(opportunity.confidence),
            difficulty=difficulty_for(len(step_texts)),
            timeframe=TIMEFRAME_BY_TYPE[opportunity.opportunity_type],
            directness=directness,
            confidence=min(opportunity.confidence, template.effectiveness),
            relevance_score=opportunity.confidence,
            impact_potential=opportunity.insight.importance,
            feasibility_score=DEFAULT_FEASIBILITY,
            evidence=extract_evidence(opportunity),
            action_steps=(
                build_action_steps([fill_template(step, variables) for step in step_texts])
                if config.include_action_steps
                else []
            ),
            risks=list(DEFAULT_RISKS) if config.include_risk_assessment else [],
            prerequisites=list(DEFAULT_PREREQUISITES),
            alternatives=list(DEFAULT_ALTERNATIVES) if config.include_alternatives else [],
            success_metrics=list(DEFAULT_SUCCESS_METRICS),
            tracking_methods=list(DEFAULT_TRACKING_METHODS),
            review_timeframe=DEFAULT_REVIEW_TIMEFRAME,
            tags=[
                opportunity.opportunity_type.value,
                opportunity.insight.category.value,
                template.slug,
                f"template:{template.id}",
            ],
        )

    async def generate_with_ai(
        self,
        opportunity: RecommendationOpportunity,
        context: RecommendationGenerationContext,
        config: Optional[RecommendationGenerationConfig] = None,
    ) -> GeneratedRecommendation:
        """Ask the completion capability for a recommendation.

        Raises:
            GenerationError: If AI is unavailable, the call fails or times out
            ParsingError: If the response is not the expected JSON object
        """
        config = config or self.config
        if self.ai is None or not config.enable_ai_generation:
            raise GenerationError("AI generation not available")

        prompt = build_recommendation_prompt(opportunity, context)
        options = {"max_tokens": config.max_tokens, "temperature": config.temperature}
        try:
            call = self.ai.generate_completion(prompt, options)
            if config.completion_timeout_seconds is not None:
                response = await asyncio.wait_for(call, timeout=config.completion_timeout_seconds)
            else:
                response = await call
        except asyncio.TimeoutError as exc:
            raise GenerationError(
                f"AI completion timed out after {config.completion_timeout_seconds}s",
                details={"insight_id": opportunity.insight_id},
            ) from exc
        except InsightflowError:
            raise
        except Exception as exc:
            raise GenerationError(
                f"AI completion failed: {exc}",
                details={"insight_id": opportunity.insight_id},
            ) from exc

        payload = parse_ai_response(response)
        return self._recommendation_from_payload(payload, opportunity, config)

    async def generate_for_opportunity(
        self,
        opportunity: RecommendationOpportunity,
        context: RecommendationGenerationContext,
        config: Optional[RecommendationGenerationConfig] = None,
    ) -> Optional[GeneratedRecommendation]:
        """Apply the strategy and fallback policy to one opportunity.

        Returns None when no template matches and AI is not in use. AI
        failures propagate unless a template fallback is possible.
        """
        config = config or self.config
        if config.enable_ai_generation and self.ai is not None:
            try:
                return await self.generate_with_ai(opportunity, context, config)
            except (GenerationError, ParsingError) as exc:
                template = self.registry.find_best(opportunity.opportunity_type)
                if not config.fallback_to_templates or template is None:
                    raise
                logger.warning(
                    f"AI generation failed for insight {opportunity.insight_id} "
                    f"({exc.code}); falling back to template {template.id}"
                )
                return self.generate_with_template(opportunity, template, context, config)

        template = self.registry.find_best(opportunity.opportunity_type)
        if template is None:
            return None
        return self.generate_with_template(opportunity, template, context, config)

    # ------------------------------------------------------------------
    # Specialised entry points
    # ------------------------------------------------------------------

    async def generate_quick_wins(
        self, insights: Sequence[Insight], max_count: int = 5
    ) -> List[GeneratedRecommendation]:
        """High-confidence action recommendations for the coming week."""
        opportunities = [
            opp
            for opp in self.identify_opportunities(insights)
            if opp.confidence > QUICK_WIN_CONFIDENCE
            and opp.opportunity_type == RecommendationType.ACTION
        ]
        opportunities.sort(key=lambda opp: opp.confidence, reverse=True)
        context = self._default_context(insights, self.config, days=7, scope=GenerationScope.WEEKLY)
        return await self._generate_validated(opportunities[:max_count], context)

    async def generate_strategic_recommendations(
        self, insights: Sequence[Insight], timeframe: Timeframe
    ) -> List[GeneratedRecommendation]:
        """Goal, learning and optimization recommendations for long horizons."""
        opportunities = [
            opp
            for opp in self.identify_opportunities(insights)
            if timeframe == Timeframe.LONG_TERM and opp.opportunity_type in STRATEGIC_TYPES
        ]
        opportunities.sort(key=lambda opp: opp.confidence, reverse=True)
        scope = (
            GenerationScope.QUARTERLY if timeframe == Timeframe.LONG_TERM else GenerationScope.MONTHLY
        )
        context = self._default_context(
            insights, self.config, days=TIMEFRAME_DAYS[timeframe], scope=scope
        )
        return await self._generate_validated(opportunities, context)

    async def generate_habit_recommendations(
        self, insights: Sequence[Insight]
    ) -> List[GeneratedRecommendation]:
        opportunities = [
            opp
            for opp in self.identify_opportunities(insights)
            if opp.opportunity_type == RecommendationType.HABIT
        ]
        opportunities.sort(key=lambda opp: opp.confidence, reverse=True)
        context = self._default_context(insights, self.config, days=30, scope=GenerationScope.MONTHLY)
        return await self._generate_validated(opportunities, context)

    # ------------------------------------------------------------------
    # Assessment
    # ------------------------------------------------------------------

    @staticmethod
    def assess_feasibility(
        recommendation: GeneratedRecommendation,
        context: RecommendationGenerationContext,
    ) -> float:
        score = 0.5 + DIFFICULTY_FEASIBILITY[recommendation.difficulty]
        score += TIME_FEASIBILITY.get(context.contextual_factors.available_time, 0.0)
        if len(recommendation.prerequisites) > 3:
            score -= 0.1
        return clamp(score)

    @staticmethod
    def assess_impact(
        recommendation: GeneratedRecommendation, insights: Sequence[Insight]
    ) -> float:
        score = recommendation.impact_potential
        sources = set(recommendation.source_insights)
        supporting = sum(1 for insight in insights if insight.id in sources)
        if supporting > 1:
            score += 0.1 * (supporting - 1)
        score += URGENCY_IMPACT[recommendation.urgency]
        return clamp(score)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_config(self, config: ConfigInput) -> RecommendationGenerationConfig:
        if config is None:
            return self.config
        if isinstance(config, RecommendationGenerationConfig):
            return config
        return build_generation_config(self.config, config)

    def _prioritizer_for(self, config: RecommendationGenerationConfig) -> RecommendationPrioritizer:
        if self.prioritizer is not None:
            return self.prioritizer
        return RecommendationPrioritizer(use_urgency=config.prioritize_urgency)

    @staticmethod
    def _default_context(
        insights: Sequence[Insight],
        config: RecommendationGenerationConfig,
        *,
        days: int = 7,
        scope: GenerationScope = GenerationScope.WEEKLY,
    ) -> RecommendationGenerationContext:
        now = utc_now()
        return RecommendationGenerationContext(
            insights=list(insights),
            user_preferences=config.user_preferences,
            contextual_factors=config.contextual_factors,
            timeframe=DateRange(start=now, end=now + timedelta(days=days)),
            scope=scope,
        )

    async def _generate_validated(
        self,
        opportunities: Sequence[RecommendationOpportunity],
        context: RecommendationGenerationContext,
    ) -> List[GeneratedRecommendation]:
        warnings: List[str] = []
        generated = await self._generate_all(opportunities, context, self.config, None, warnings)
        for warning in warnings:
            logger.warning(warning)
        return self._validate_and_enhance(generated, context.insights, context, self.config, [])

    async def _generate_all(
        self,
        opportunities: Sequence[RecommendationOpportunity],
        context: RecommendationGenerationContext,
        config: RecommendationGenerationConfig,
        deadline: Optional[float],
        warnings: List[str],
    ) -> List[GeneratedRecommendation]:
        if not opportunities:
            return []
        if not (config.enable_ai_generation and self.ai is not None):
            return [
                rec
                for rec in (self._template_or_skip(opp, context, config, warnings) for opp in opportunities)
                if rec is not None
            ]

        semaphore = asyncio.Semaphore(config.max_concurrent_completions)

        async def _bounded(opportunity: RecommendationOpportunity) -> Optional[GeneratedRecommendation]:
            async with semaphore:
                return await self.generate_for_opportunity(opportunity, context, config)

        tasks = [asyncio.create_task(_bounded(opp)) for opp in opportunities]
        timeout = deadline if deadline is not None else config.deadline_seconds
        try:
            _, pending = await asyncio.wait(tasks, timeout=timeout)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            warnings.append(
                f"Deadline reached; {len(pending)} pending AI generations were cancelled"
            )

        recommendations: List[GeneratedRecommendation] = []
        for opportunity, task in zip(opportunities, tasks):
            if task in pending:
                recommendation = self._template_or_skip(opportunity, context, config, warnings)
            else:
                error = task.exception()
                if isinstance(error, RecommendationError):
                    warnings.append(
                        f"Skipped {opportunity.opportunity_type.value} opportunity for insight "
                        f"{opportunity.insight_id}: {error.message}"
                    )
                    continue
                if error is not None:
                    raise error
                recommendation = task.result()
                if recommendation is None:
                    warnings.append(self._no_template_warning(opportunity))
            if recommendation is not None:
                recommendations.append(recommendation)
        return recommendations

    def _template_or_skip(
        self,
        opportunity: RecommendationOpportunity,
        context: RecommendationGenerationContext,
        config: RecommendationGenerationConfig,
        warnings: List[str],
    ) -> Optional[GeneratedRecommendation]:
        template = self.registry.find_best(opportunity.opportunity_type)
        if template is None:
            warnings.append(self._no_template_warning(opportunity))
            return None
        return self.generate_with_template(opportunity, template, context, config)

    @staticmethod
    def _no_template_warning(opportunity: RecommendationOpportunity) -> str:
        return (
            f"No template for {opportunity.opportunity_type.value} opportunity from insight "
            f"{opportunity.insight_id}; no recommendation generated"
        )

    def _recommendation_from_payload(
        self,
        payload: AIRecommendationPayload,
        opportunity: RecommendationOpportunity,
        config: RecommendationGenerationConfig,
    ) -> GeneratedRecommendation:
        steps = payload.action_steps if config.include_action_steps else []
        return GeneratedRecommendation(
            title=payload.title,
            description=payload.description,
            type=opportunity.opportunity_type,
            category=opportunity.insight.category,
            source_insights=[opportunity.insight_id],
            generation_method=GenerationMethod.AI,
            urgency=urgency_for(opportunity.confidence),
            difficulty=difficulty_for(len(payload.action_steps)),
            timeframe=TIMEFRAME_BY_TYPE[opportunity.opportunity_type],
            directness=config.user_preferences.preferred_directness,
            confidence=opportunity.confidence,
            relevance_score=opportunity.confidence,
            impact_potential=opportunity.insight.importance,
            feasibility_score=DEFAULT_FEASIBILITY,
            evidence=extract_evidence(opportunity),
            action_steps=build_action_steps(steps),
            risks=list(payload.risks) if config.include_risk_assessment else [],
            success_metrics=list(payload.success_metrics),
            review_timeframe=DEFAULT_REVIEW_TIMEFRAME,
            tags=[opportunity.opportunity_type.value, opportunity.insight.category.value, "ai"],
        )

    def _validate_and_enhance(
        self,
        recommendations: Sequence[GeneratedRecommendation],
        insights: Sequence[Insight],
        context: RecommendationGenerationContext,
        config: RecommendationGenerationConfig,
        warnings: List[str],
    ) -> List[GeneratedRecommendation]:
        accepted = []
        for recommendation in recommendations:
            try:
                self.validator.ensure_valid(recommendation)
            except ValidationError as exc:
                problems = exc.details["problems"]
                logger.warning(f"Excluding invalid recommendation {recommendation.id}: {problems}")
                warnings.append(f"Excluded invalid recommendation {recommendation.id}: {problems}")
                continue
            if config.enable_feasibility_check:
                recommendation.feasibility_score = self.assess_feasibility(recommendation, context)
            if config.enable_impact_assessment:
                recommendation.impact_potential = self.assess_impact(recommendation, insights)
            accepted.append(recommendation)
        return accepted

    @staticmethod
    def _remove_duplicates(
        recommendations: Sequence[GeneratedRecommendation],
        context: RecommendationGenerationContext,
        warnings: List[str],
    ) -> List[GeneratedRecommendation]:
        seen = {(r.type, _normalized_title(r)) for r in context.existing_recommendations}
        unique = []
        for recommendation in recommendations:
            key = (recommendation.type, _normalized_title(recommendation))
            if key in seen:
                continue
            seen.add(key)
            unique.append(recommendation)
        removed = len(recommendations) - len(unique)
        if removed:
            warnings.append(f"Removed {removed} duplicate recommendations")
        return unique

    @staticmethod
    def _build_result(
        ranked: List[GeneratedRecommendation],
        clusters: list,
        opportunities: Sequence[RecommendationOpportunity],
        selected: Sequence[RecommendationOpportunity],
        prioritizer: RecommendationPrioritizer,
        warnings: List[str],
        started: float,
    ) -> RecommendationGenerationResult:
        count = len(ranked)
        diversity = (
            (len({r.type for r in ranked}) + len({r.category for r in ranked})) / (2 * count)
            if count
            else 0.0
        )
        templates_used: List[str] = []
        for recommendation in ranked:
            if recommendation.generation_method != GenerationMethod.TEMPLATE:
                continue
            for tag in recommendation.tags:
                if tag.startswith("template:"):
                    template_id = tag.split(":", 1)[1]
                    if template_id not in templates_used:
                        templates_used.append(template_id)

        return RecommendationGenerationResult(
            recommendations=ranked,
            clusters=clusters,
            total_opportunities=len(opportunities),
            opportunities_processed=len(selected),
            recommendations_generated=count,
            average_confidence=_mean([r.confidence for r in ranked]),
            diversity_score=diversity,
            feasibility_score=_mean([r.feasibility_score for r in ranked]),
            impact_score=_mean([r.impact_potential for r in ranked]),
            generation_time=(time.perf_counter() - started) * 1000,
            templates_used=templates_used,
            warnings=warnings,
            priority_recommendations=prioritizer.priority_recommendations(ranked),
            quick_wins=prioritizer.quick_wins(ranked),
            long_term_goals=prioritizer.long_term_goals(ranked),
        )

    @staticmethod
    def _error_result(error: Exception, started: float) -> RecommendationGenerationResult:
        return RecommendationGenerationResult(
            generation_time=(time.perf_counter() - started) * 1000,
            warnings=[f"Generation failed: {error}"],
        )


def _interleave_by_category(
    opportunities: Sequence[RecommendationOpportunity],
) -> List[RecommendationOpportunity]:
    groups: Dict[Any, List[RecommendationOpportunity]] = {}
    for opportunity in opportunities:
        groups.setdefault(opportunity.insight.category, []).append(opportunity)
    interleaved: List[RecommendationOpportunity] = []
    queues = list(groups.values())
    while queues:
        for queue in queues:
            interleaved.append(queue.pop(0))
        queues = [queue for queue in queues if queue]
    return interleaved
