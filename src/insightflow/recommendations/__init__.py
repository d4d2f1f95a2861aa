"""Recommendation generation pipeline."""

from insightflow.recommendations.ai import (
    AIRecommendationPayload,
    CompletionCapability,
    LLMClientCompletionAdapter,
    build_recommendation_prompt,
    parse_ai_response,
)
from insightflow.recommendations.clustering import RecommendationClusterer
from insightflow.recommendations.factory import RecommendationGeneratorFactory
from insightflow.recommendations.generator import RecommendationGenerator
from insightflow.recommendations.opportunities import OpportunityIdentifier
from insightflow.recommendations.ranking import RecommendationPrioritizer
from insightflow.recommendations.templates import (
    BASIC_ACTION_TEMPLATE,
    TemplateRegistry,
    fill_template,
)
from insightflow.recommendations.validation import RecommendationValidator

__all__ = [
    "AIRecommendationPayload",
    "BASIC_ACTION_TEMPLATE",
    "CompletionCapability",
    "LLMClientCompletionAdapter",
    "OpportunityIdentifier",
    "RecommendationClusterer",
    "RecommendationGenerator",
    "RecommendationGeneratorFactory",
    "RecommendationPrioritizer",
    "RecommendationValidator",
    "TemplateRegistry",
    "build_recommendation_prompt",
    "fill_template",
    "parse_ai_response",
]
