"""Domain presets for the recommendation generator.

Each preset pairs a tuned :class:`RecommendationGenerationConfig` with a pack
of domain templates registered on a fresh :class:`TemplateRegistry`, so
generators built here never share template state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from insightflow.configuration.settings import (
    RecommendationGenerationConfig,
    build_generation_config,
)
from insightflow.models.enums import (
    Directness,
    InsightCategory,
    InsightType,
    RecommendationType,
    TemplateUsage,
)
from insightflow.models.recommendation import RecommendationTemplate, TemplateVariation
from insightflow.recommendations.ai import CompletionCapability
from insightflow.recommendations.generator import RecommendationGenerator
from insightflow.recommendations.templates import TemplateRegistry

logger = logging.getLogger(__name__)

PATTERN_OBSERVATION = [InsightType.PATTERN, InsightType.OBSERVATION]
OPPORTUNITY_RECOMMENDATION = [InsightType.OPPORTUNITY, InsightType.RECOMMENDATION]


PERSONAL_DEVELOPMENT_TEMPLATES: List[RecommendationTemplate] = [
    RecommendationTemplate(
        id="personal-habit-development",
        name="Personal Habit Development",
        type=RecommendationType.HABIT,
        category=InsightCategory.HABITS,
        title_template="Develop a {{habit_type}} habit for {{benefit}}",
        description_template=(
            "Based on your pattern of {{insight_description}}, developing a consistent "
            "{{habit_type}} habit could help you {{expected_outcome}}. Start small and "
            "build gradually for sustainable change."
        ),
        action_steps_template=[
            "Define the specific habit you want to develop",
            "Start with a minimal viable version (2-5 minutes daily)",
            "Choose a consistent time and trigger",
            "Track your progress daily",
            "Gradually increase intensity after 2 weeks",
        ],
        applicable_insight_types=PATTERN_OBSERVATION,
        minimum_confidence=0.4,
        required_evidence=2,
        variables=["habit_type", "benefit", "insight_description", "expected_outcome"],
        variations=[
            TemplateVariation(
                condition="high_stress",
                description_variation=(
                    "Given your current stress levels, developing a {{habit_type}} habit "
                    "could provide valuable {{benefit}}. Focus on consistency over intensity."
                ),
                directness_adjustment=Directness.SUGGESTION,
            )
        ],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.8,
    ),
    RecommendationTemplate(
        id="personal-learning-goal",
        name="Personal Learning Goal",
        type=RecommendationType.LEARNING,
        category=InsightCategory.LEARNING,
        title_template="Learn {{skill_area}} to {{improvement_goal}}",
        description_template=(
            "Your insights suggest an opportunity to develop {{skill_area}} skills. This "
            "could help you {{improvement_goal}} and align with your personal growth objectives."
        ),
        action_steps_template=[
            "Research learning resources and methods",
            "Set aside dedicated learning time (15-30 minutes daily)",
            "Find a learning community or accountability partner",
            "Practice regularly with real-world applications",
            "Review and adjust your learning approach monthly",
        ],
        applicable_insight_types=OPPORTUNITY_RECOMMENDATION,
        minimum_confidence=0.5,
        required_evidence=1,
        variables=["skill_area", "improvement_goal"],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.75,
    ),
    RecommendationTemplate(
        id="personal-reflection-practice",
        name="Personal Reflection Practice",
        type=RecommendationType.REFLECTION,
        category=InsightCategory.WELLBEING,
        title_template="Establish a {{reflection_type}} reflection practice",
        description_template=(
            "Regular {{reflection_type}} reflection could help you better understand "
            "{{insight_area}} and make more intentional decisions about {{focus_area}}."
        ),
        action_steps_template=[
            "Choose a consistent time for reflection",
            "Start with 5-10 minutes of focused thinking",
            "Use guided questions or prompts",
            "Write down key insights and patterns",
            "Review your reflections weekly to identify trends",
        ],
        applicable_insight_types=PATTERN_OBSERVATION,
        minimum_confidence=0.3,
        required_evidence=1,
        variables=["reflection_type", "insight_area", "focus_area"],
        usage=TemplateUsage.OCCASIONAL,
        effectiveness=0.7,
    ),
]

PRODUCTIVITY_TEMPLATES: List[RecommendationTemplate] = [
    RecommendationTemplate(
        id="productivity-process-optimization",
        name="Process Optimization",
        type=RecommendationType.OPTIMIZATION,
        category=InsightCategory.PRODUCTIVITY,
        title_template="Optimize your {{process_name}} process",
        description_template=(
            "Your data shows inefficiencies in {{process_name}}. Streamlining this process "
            "could save you {{time_savings}} and improve {{quality_metric}}."
        ),
        action_steps_template=[
            "Document your current process step-by-step",
            "Identify bottlenecks and redundancies",
            "Research automation or tool solutions",
            "Implement one improvement at a time",
            "Measure results and iterate",
        ],
        applicable_insight_types=[InsightType.PATTERN, InsightType.ANOMALY],
        minimum_confidence=0.4,
        required_evidence=2,
        variables=["process_name", "time_savings", "quality_metric"],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.85,
    ),
    RecommendationTemplate(
        id="productivity-time-management",
        name="Time Management Action",
        type=RecommendationType.ACTION,
        category=InsightCategory.PRODUCTIVITY,
        title_template="Implement {{technique_name}} for better time management",
        description_template=(
            "Based on your time usage patterns, implementing {{technique_name}} could help "
            "you {{expected_benefit}} and reduce {{current_problem}}."
        ),
        action_steps_template=[
            "Learn the {{technique_name}} method",
            "Set up necessary tools or systems",
            "Start with a 1-week trial period",
            "Track your productivity metrics",
            "Adjust the approach based on results",
        ],
        applicable_insight_types=PATTERN_OBSERVATION,
        minimum_confidence=0.5,
        required_evidence=2,
        variables=["technique_name", "expected_benefit", "current_problem"],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.8,
    ),
]

WELLNESS_TEMPLATES: List[RecommendationTemplate] = [
    RecommendationTemplate(
        id="wellness-stress-management",
        name="Stress Management",
        type=RecommendationType.HEALTH,
        category=InsightCategory.WELLBEING,
        title_template="Develop {{stress_technique}} for stress management",
        description_template=(
            "Your patterns suggest elevated stress levels around {{stress_trigger}}. "
            "Developing {{stress_technique}} practices could help you manage stress more "
            "effectively."
        ),
        action_steps_template=[
            "Learn about {{stress_technique}} techniques",
            "Practice for 5-10 minutes daily",
            "Use the technique when you notice stress signals",
            "Track your stress levels and technique usage",
            "Gradually expand your stress management toolkit",
        ],
        applicable_insight_types=[InsightType.PATTERN, InsightType.WARNING],
        minimum_confidence=0.4,
        required_evidence=2,
        variables=["stress_technique", "stress_trigger"],
        variations=[
            TemplateVariation(
                condition="high_stress",
                description_variation=(
                    "Given your current high stress levels, it's especially important to "
                    "develop {{stress_technique}} practices. Start gently and be patient "
                    "with yourself."
                ),
                directness_adjustment=Directness.SUGGESTION,
            )
        ],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.75,
    ),
    RecommendationTemplate(
        id="wellness-sleep-improvement",
        name="Sleep Improvement",
        type=RecommendationType.HABIT,
        category=InsightCategory.WELLBEING,
        title_template="Improve your sleep quality through {{sleep_strategy}}",
        description_template=(
            "Your sleep patterns show {{sleep_issue}}. Implementing {{sleep_strategy}} could "
            "help improve your sleep quality and overall well-being."
        ),
        action_steps_template=[
            "Establish a consistent bedtime routine",
            "Create a sleep-friendly environment",
            "Limit screen time before bed",
            "Track your sleep patterns",
            "Adjust your approach based on what works",
        ],
        applicable_insight_types=PATTERN_OBSERVATION,
        minimum_confidence=0.5,
        required_evidence=3,
        variables=["sleep_strategy", "sleep_issue"],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.8,
    ),
]

CAREER_TEMPLATES: List[RecommendationTemplate] = [
    RecommendationTemplate(
        id="career-skill-development",
        name="Career Skill Development",
        type=RecommendationType.LEARNING,
        category=InsightCategory.LEARNING,
        title_template="Develop {{skill_name}} skills for career advancement",
        description_template=(
            "Your career patterns suggest that developing {{skill_name}} skills could "
            "significantly impact your {{career_goal}}. This aligns with current industry "
            "trends and your professional trajectory."
        ),
        action_steps_template=[
            "Assess your current skill level",
            "Identify specific learning objectives",
            "Find relevant courses, books, or mentors",
            "Practice skills in real work projects",
            "Seek feedback and iterate",
        ],
        applicable_insight_types=OPPORTUNITY_RECOMMENDATION,
        minimum_confidence=0.5,
        required_evidence=2,
        variables=["skill_name", "career_goal"],
        usage=TemplateUsage.FREQUENT,
        effectiveness=0.85,
    ),
    RecommendationTemplate(
        id="career-network-building",
        name="Professional Network Building",
        type=RecommendationType.ACTION,
        category=InsightCategory.RELATIONSHIPS,
        title_template="Build your professional network in {{target_area}}",
        description_template=(
            "Your career insights suggest that expanding your network in {{target_area}} "
            "could open new opportunities and provide valuable {{expected_benefit}}."
        ),
        action_steps_template=[
            "Identify key people and organizations in {{target_area}}",
            "Attend relevant industry events or online communities",
            "Engage meaningfully with content and discussions",
            "Offer value before asking for help",
            "Maintain regular contact with new connections",
        ],
        applicable_insight_types=OPPORTUNITY_RECOMMENDATION,
        minimum_confidence=0.4,
        required_evidence=1,
        variables=["target_area", "expected_benefit"],
        usage=TemplateUsage.OCCASIONAL,
        effectiveness=0.7,
    ),
    RecommendationTemplate(
        id="career-goal-setting",
        name="Career Goal Setting",
        type=RecommendationType.GOAL,
        category=InsightCategory.GOALS,
        title_template="Set and pursue {{goal_type}} career goals",
        description_template=(
            "Based on your career patterns and interests, setting clear {{goal_type}} goals "
            "could help you {{expected_outcome}} and provide direction for your "
            "professional development."
        ),
        action_steps_template=[
            "Define specific, measurable career objectives",
            "Break down goals into quarterly milestones",
            "Identify required skills and experiences",
            "Create an action plan with deadlines",
            "Review and adjust goals quarterly",
        ],
        applicable_insight_types=OPPORTUNITY_RECOMMENDATION,
        minimum_confidence=0.4,
        required_evidence=1,
        variables=["goal_type", "expected_outcome"],
        usage=TemplateUsage.OCCASIONAL,
        effectiveness=0.8,
    ),
]


PERSONAL_DEVELOPMENT_CONFIG: Dict[str, Any] = {
    "strategy": "balanced",
    "max_recommendations": 8,
    "min_confidence_threshold": 0.4,
    "prioritize_urgency": False,
    "balance_by_category": True,
    "user_preferences": {
        "preferred_directness": "recommendation",
        "preferred_timeframes": ["medium-term", "long-term"],
        "preferred_types": ["habit", "learning", "reflection", "goal"],
        "risk_tolerance": "medium",
        "detail_level": "comprehensive",
        "include_personal_touch": True,
    },
    "contextual_factors": {
        "current_life_phase": "mid-career",
        "available_time": "moderate",
        "current_stress_level": "medium",
        "work_context": "hybrid",
    },
    "temperature": 0.7,
    "max_tokens": 600,
}

PRODUCTIVITY_CONFIG: Dict[str, Any] = {
    "strategy": "aggressive",
    "max_recommendations": 10,
    "min_confidence_threshold": 0.3,
    "include_risk_assessment": False,
    "exclude_types": ["reflection"],
    "prioritize_urgency": True,
    "balance_by_category": False,
    "user_preferences": {
        "preferred_directness": "strong-recommendation",
        "preferred_timeframes": ["immediate", "short-term"],
        "preferred_types": ["action", "optimization", "productivity", "habit"],
        "risk_tolerance": "high",
        "detail_level": "standard",
        "include_personal_touch": False,
    },
    "contextual_factors": {
        "current_life_phase": "early-career",
        "available_time": "limited",
        "current_stress_level": "high",
        "work_context": "office",
    },
    "temperature": 0.5,
    "max_tokens": 400,
}

WELLNESS_CONFIG: Dict[str, Any] = {
    "strategy": "conservative",
    "max_recommendations": 6,
    "min_confidence_threshold": 0.5,
    "exclude_types": ["decision"],
    "prioritize_urgency": False,
    "balance_by_category": True,
    "user_preferences": {
        "preferred_directness": "suggestion",
        "preferred_timeframes": ["medium-term", "long-term"],
        "preferred_types": ["health", "habit", "reflection", "prevention"],
        "risk_tolerance": "low",
        "detail_level": "comprehensive",
        "include_personal_touch": True,
    },
    "contextual_factors": {
        "current_life_phase": "mid-career",
        "available_time": "flexible",
        "current_stress_level": "medium",
        "work_context": "remote",
    },
    "temperature": 0.8,
    "max_tokens": 500,
}

CAREER_CONFIG: Dict[str, Any] = {
    "strategy": "balanced",
    "max_recommendations": 8,
    "min_confidence_threshold": 0.4,
    "exclude_types": ["health"],
    "prioritize_urgency": True,
    "balance_by_category": False,
    "user_preferences": {
        "preferred_directness": "recommendation",
        "preferred_timeframes": ["short-term", "medium-term", "long-term"],
        "preferred_types": ["career", "learning", "optimization", "goal", "decision"],
        "risk_tolerance": "medium",
        "detail_level": "comprehensive",
        "include_personal_touch": False,
    },
    "contextual_factors": {
        "current_life_phase": "early-career",
        "available_time": "moderate",
        "current_stress_level": "medium",
        "work_context": "hybrid",
    },
    "temperature": 0.6,
    "max_tokens": 550,
}


class RecommendationGeneratorFactory:
    """Builds generators tuned for a domain.

    AI generation is enabled only when a completion capability is passed.

    Example Usage:
        generator = RecommendationGeneratorFactory.create_for_wellness()
        result = await generator.generate_recommendations(insights)
    """

    @staticmethod
    def _build(
        preset: Mapping[str, Any],
        templates: Sequence[RecommendationTemplate],
        ai: Optional[CompletionCapability],
    ) -> RecommendationGenerator:
        config = build_generation_config(
            overrides={**preset, "enable_ai_generation": ai is not None}
        )
        registry = TemplateRegistry(templates)
        return RecommendationGenerator(config, registry=registry, ai=ai)

    @classmethod
    def create_for_personal_development(
        cls, ai: Optional[CompletionCapability] = None
    ) -> RecommendationGenerator:
        return cls._build(PERSONAL_DEVELOPMENT_CONFIG, PERSONAL_DEVELOPMENT_TEMPLATES, ai)

    @classmethod
    def create_for_productivity(
        cls, ai: Optional[CompletionCapability] = None
    ) -> RecommendationGenerator:
        return cls._build(PRODUCTIVITY_CONFIG, PRODUCTIVITY_TEMPLATES, ai)

    @classmethod
    def create_for_wellness(cls, ai: Optional[CompletionCapability] = None) -> RecommendationGenerator:
        return cls._build(WELLNESS_CONFIG, WELLNESS_TEMPLATES, ai)

    @classmethod
    def create_for_career(cls, ai: Optional[CompletionCapability] = None) -> RecommendationGenerator:
        return cls._build(CAREER_CONFIG, CAREER_TEMPLATES, ai)

    @staticmethod
    def create_custom(
        config: Union[RecommendationGenerationConfig, Mapping[str, Any], None] = None,
        *,
        templates: Optional[Sequence[RecommendationTemplate]] = None,
        ai: Optional[CompletionCapability] = None,
    ) -> RecommendationGenerator:
        """Generator from an explicit config and optional extra templates.

        Raises:
            ConfigurationError: If a config mapping does not validate
        """
        if not isinstance(config, RecommendationGenerationConfig):
            config = build_generation_config(overrides=config)
        return RecommendationGenerator(config, registry=TemplateRegistry(templates), ai=ai)

    @classmethod
    def create_for_domain(
        cls, domain: str, ai: Optional[CompletionCapability] = None
    ) -> RecommendationGenerator:
        """Preset generator by domain name; raises ValueError for unknown names."""
        builder = DOMAIN_BUILDERS.get(domain)
        if builder is None:
            raise ValueError(
                f"Unknown domain '{domain}'. Expected one of: {', '.join(sorted(DOMAIN_BUILDERS))}"
            )
        logger.debug(f"Creating {domain} recommendation generator")
        return builder(ai)


DOMAIN_BUILDERS: Dict[str, Callable[[Optional[CompletionCapability]], RecommendationGenerator]] = {
    "personal-development": RecommendationGeneratorFactory.create_for_personal_development,
    "productivity": RecommendationGeneratorFactory.create_for_productivity,
    "wellness": RecommendationGeneratorFactory.create_for_wellness,
    "career": RecommendationGeneratorFactory.create_for_career,
}
