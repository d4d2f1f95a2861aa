"""Recommendation pipeline records.

Opportunities, templates, generated recommendations, clusters and the run
result. Output records are plain dataclasses with ``to_dict`` for JSON; they
are not persisted here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from insightflow.models.enums import (
    Difficulty,
    Directness,
    GenerationMethod,
    InsightCategory,
    InsightType,
    IssueSeverity,
    IssueType,
    RecommendationType,
    TemplateUsage,
    Timeframe,
    Urgency,
)
from insightflow.models.insight import Insight, utc_now


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


@dataclass
class RecommendationOpportunity:
    """A candidate recommendation type mined from one insight."""

    insight: Insight
    opportunity_type: RecommendationType
    confidence: float
    reasoning: str = ""
    suggested_actions: List[str] = field(default_factory=list)
    potential_impact: str = ""
    implementation_notes: str = ""

    @property
    def insight_id(self) -> str:
        return self.insight.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insight_id": self.insight_id,
            "opportunity_type": self.opportunity_type.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "suggested_actions": list(self.suggested_actions),
            "potential_impact": self.potential_impact,
            "implementation_notes": self.implementation_notes,
        }


@dataclass
class TemplateVariation:
    """Conditional override applied when ``condition`` holds for the context."""

    condition: str
    title_variation: Optional[str] = None
    description_variation: Optional[str] = None
    action_steps_variation: Optional[List[str]] = None
    directness_adjustment: Optional[Directness] = None


@dataclass
class RecommendationTemplate:
    """Reusable, parameterized skeleton for a recommendation.

    Placeholders use ``{{name}}`` syntax and should be listed in
    ``variables``.
    """

    id: str
    name: str
    type: RecommendationType
    category: InsightCategory
    title_template: str
    description_template: str
    action_steps_template: List[str] = field(default_factory=list)
    applicable_insight_types: List[InsightType] = field(default_factory=list)
    minimum_confidence: float = 0.3
    required_evidence: int = 0
    variables: List[str] = field(default_factory=list)
    variations: List[TemplateVariation] = field(default_factory=list)
    usage: TemplateUsage = TemplateUsage.OCCASIONAL
    effectiveness: float = 0.5

    @property
    def slug(self) -> str:
        return "-".join(self.name.lower().split())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "category": self.category.value,
            "title_template": self.title_template,
            "description_template": self.description_template,
            "action_steps_template": list(self.action_steps_template),
            "applicable_insight_types": [t.value for t in self.applicable_insight_types],
            "minimum_confidence": self.minimum_confidence,
            "required_evidence": self.required_evidence,
            "variables": list(self.variables),
            "variations": [
                {
                    "condition": v.condition,
                    "title_variation": v.title_variation,
                    "description_variation": v.description_variation,
                    "action_steps_variation": v.action_steps_variation,
                    "directness_adjustment": (
                        v.directness_adjustment.value if v.directness_adjustment else None
                    ),
                }
                for v in self.variations
            ],
            "usage": self.usage.value,
            "effectiveness": self.effectiveness,
        }


@dataclass
class ActionStep:
    id: str
    title: str
    description: str
    order: int
    estimated_time: str = "30 minutes"
    dependencies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "order": self.order,
            "estimated_time": self.estimated_time,
            "dependencies": list(self.dependencies),
        }


@dataclass
class RecommendationEvidence:
    insight_id: str
    excerpt: str
    relevance_score: float = 0.5
    support_type: str = "direct"
    file_path: str = ""
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insight_id": self.insight_id,
            "excerpt": self.excerpt,
            "relevance_score": self.relevance_score,
            "support_type": self.support_type,
            "file_path": self.file_path,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class GeneratedRecommendation:
    """A fully formed, actionable suggestion.

    ``source_insights`` must name at least one insight; recommendations that
    break this are rejected by the validator rather than here.
    """

    title: str
    description: str
    type: RecommendationType
    category: InsightCategory
    source_insights: List[str]
    generation_method: GenerationMethod
    id: str = field(default_factory=lambda: new_id("rec"))
    urgency: Urgency = Urgency.MEDIUM
    difficulty: Difficulty = Difficulty.MODERATE
    timeframe: Timeframe = Timeframe.MEDIUM_TERM
    directness: Directness = Directness.RECOMMENDATION
    confidence: float = 0.5
    relevance_score: float = 0.5
    impact_potential: float = 0.5
    feasibility_score: float = 0.7
    evidence: List[RecommendationEvidence] = field(default_factory=list)
    action_steps: List[ActionStep] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)
    prerequisites: List[str] = field(default_factory=list)
    alternatives: List[str] = field(default_factory=list)
    success_metrics: List[str] = field(default_factory=list)
    tracking_methods: List[str] = field(default_factory=list)
    review_timeframe: str = "2 weeks"
    generated_at: datetime = field(default_factory=utc_now)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "category": self.category.value,
            "urgency": self.urgency.value,
            "difficulty": self.difficulty.value,
            "timeframe": self.timeframe.value,
            "directness": self.directness.value,
            "confidence": self.confidence,
            "relevance_score": self.relevance_score,
            "impact_potential": self.impact_potential,
            "feasibility_score": self.feasibility_score,
            "source_insights": list(self.source_insights),
            "evidence": [e.to_dict() for e in self.evidence],
            "action_steps": [s.to_dict() for s in self.action_steps],
            "risks": list(self.risks),
            "prerequisites": list(self.prerequisites),
            "alternatives": list(self.alternatives),
            "success_metrics": list(self.success_metrics),
            "tracking_methods": list(self.tracking_methods),
            "review_timeframe": self.review_timeframe,
            "generated_at": self.generated_at.isoformat(),
            "generation_method": self.generation_method.value,
            "tags": list(self.tags),
        }


@dataclass
class RecommendationCluster:
    """Related recommendations grouped under a common theme."""

    theme: str
    recommendations: List[GeneratedRecommendation]
    combined_impact: float
    synergies: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    priority_order: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: new_id("cluster"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "theme": self.theme,
            "recommendations": [r.id for r in self.recommendations],
            "combined_impact": self.combined_impact,
            "synergies": list(self.synergies),
            "conflicts": list(self.conflicts),
            "priority_order": list(self.priority_order),
        }


@dataclass
class ValidationIssue:
    type: IssueType
    field: str
    message: str
    severity: IssueSeverity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass
class ValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    confidence: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": list(self.suggestions),
            "confidence": self.confidence,
        }


@dataclass
class RecommendationGenerationResult:
    """Everything one ``generate_recommendations`` call produced.

    ``generation_time`` is in milliseconds. A zero-valued result with a
    warning is returned when the run fails as a whole.
    """

    recommendations: List[GeneratedRecommendation] = field(default_factory=list)
    clusters: List[RecommendationCluster] = field(default_factory=list)
    total_opportunities: int = 0
    opportunities_processed: int = 0
    recommendations_generated: int = 0
    average_confidence: float = 0.0
    diversity_score: float = 0.0
    feasibility_score: float = 0.0
    impact_score: float = 0.0
    generation_time: float = 0.0
    templates_used: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    priority_recommendations: List[str] = field(default_factory=list)
    quick_wins: List[str] = field(default_factory=list)
    long_term_goals: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "clusters": [c.to_dict() for c in self.clusters],
            "total_opportunities": self.total_opportunities,
            "opportunities_processed": self.opportunities_processed,
            "recommendations_generated": self.recommendations_generated,
            "average_confidence": self.average_confidence,
            "diversity_score": self.diversity_score,
            "feasibility_score": self.feasibility_score,
            "impact_score": self.impact_score,
            "generation_time": self.generation_time,
            "templates_used": list(self.templates_used),
            "warnings": list(self.warnings),
            "priority_recommendations": list(self.priority_recommendations),
            "quick_wins": list(self.quick_wins),
            "long_term_goals": list(self.long_term_goals),
        }
