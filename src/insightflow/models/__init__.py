"""Domain records for insights and recommendations.

Context bundles live in :mod:`insightflow.models.context` because they embed
configuration models.
"""

from insightflow.models.enums import (
    Audience,
    Difficulty,
    Directness,
    EvidenceType,
    GenerationMethod,
    GenerationScope,
    InsightCategory,
    InsightType,
    IssueSeverity,
    IssueType,
    Purpose,
    RecommendationType,
    TemplateUsage,
    Timeframe,
    Urgency,
)
from insightflow.models.insight import DateRange, Insight, InsightEvidence
from insightflow.models.recommendation import (
    ActionStep,
    GeneratedRecommendation,
    RecommendationCluster,
    RecommendationEvidence,
    RecommendationGenerationResult,
    RecommendationOpportunity,
    RecommendationTemplate,
    TemplateVariation,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ActionStep",
    "Audience",
    "DateRange",
    "Difficulty",
    "Directness",
    "EvidenceType",
    "GeneratedRecommendation",
    "GenerationMethod",
    "GenerationScope",
    "Insight",
    "InsightCategory",
    "InsightEvidence",
    "InsightType",
    "IssueSeverity",
    "IssueType",
    "Purpose",
    "RecommendationCluster",
    "RecommendationEvidence",
    "RecommendationGenerationResult",
    "RecommendationOpportunity",
    "RecommendationTemplate",
    "RecommendationType",
    "TemplateUsage",
    "TemplateVariation",
    "Timeframe",
    "Urgency",
    "ValidationIssue",
    "ValidationResult",
]
