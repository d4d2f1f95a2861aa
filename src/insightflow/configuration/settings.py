"""Typed settings for the prioritization engine and recommendation pipeline.

Every tunable weight, threshold and switch lives in a Pydantic model so the
engine and generator can rely on validated values. Invalid values are
rejected when a configuration is built, never in the middle of a run.
Settings can be persisted as JSON and overridden from the environment.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from insightflow.errors import ConfigurationError, InvalidConfigError
from insightflow.models.enums import (
    Directness,
    InsightCategory,
    InsightType,
    RecommendationType,
    Timeframe,
)


DEFAULT_CONFIG_PATH = Path.home() / ".insightflow" / "config.json"

DEFAULT_CATEGORY_LIMITS: Dict[InsightCategory, int] = {
    InsightCategory.PRODUCTIVITY: 5,
    InsightCategory.WELLBEING: 3,
    InsightCategory.RELATIONSHIPS: 2,
    InsightCategory.LEARNING: 3,
    InsightCategory.GOALS: 4,
    InsightCategory.HABITS: 3,
    InsightCategory.CHALLENGES: 3,
    InsightCategory.OPPORTUNITIES: 3,
    InsightCategory.PATTERNS: 4,
    InsightCategory.TRENDS: 2,
    InsightCategory.ACHIEVEMENTS: 3,
    InsightCategory.CONCERNS: 2,
}

DEFAULT_TYPE_LIMITS: Dict[InsightType, int] = {
    InsightType.OBSERVATION: 3,
    InsightType.CORRELATION: 2,
    InsightType.CAUSATION: 2,
    InsightType.PREDICTION: 3,
    InsightType.RECOMMENDATION: 5,
    InsightType.WARNING: 2,
    InsightType.OPPORTUNITY: 3,
    InsightType.ACHIEVEMENT: 2,
    InsightType.PATTERN: 3,
    InsightType.ANOMALY: 1,
}


def _merge_limits(defaults: Mapping[Any, Optional[int]], value: Any) -> Dict[str, Optional[int]]:
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise ValueError("limits must be a mapping of group name to limit")
    merged: Dict[str, Optional[int]] = {key.value: limit for key, limit in defaults.items()}
    for key, limit in value.items():
        merged[getattr(key, "value", key)] = limit
    return merged


class PriorityWeighting(BaseModel):
    """Relative weight of each scoring component."""

    recency: float = Field(0.15, ge=0.0)
    frequency: float = Field(0.15, ge=0.0)
    confidence: float = Field(0.25, ge=0.0)
    impact: float = Field(0.25, ge=0.0, description="Weight applied to insight importance")
    novelty: float = Field(0.1, ge=0.0)
    actionability: float = Field(0.1, ge=0.0)

    @property
    def total(self) -> float:
        return (
            self.recency
            + self.frequency
            + self.confidence
            + self.impact
            + self.novelty
            + self.actionability
        )

    @model_validator(mode="after")
    def _validate_total(self) -> "PriorityWeighting":
        if self.total <= 0:
            raise ValueError("at least one scoring weight must be positive")
        return self


class PrioritizationConfig(BaseModel):
    """Configuration for :class:`InsightPrioritizationEngine`.

    ``category_limits`` and ``type_limits`` are merged onto the defaults; a
    ``None`` limit lifts the cap for that group. ``max_similar_insights`` is
    how many mutually similar insights may survive together (1 keeps only the
    best of each near-duplicate group).
    """

    weights: PriorityWeighting = Field(default_factory=PriorityWeighting)

    min_confidence_threshold: float = Field(0.3, ge=0.0, le=1.0)
    min_importance_threshold: float = Field(0.3, ge=0.0, le=1.0)
    max_insights: int = Field(20, ge=1)

    enable_redundancy_filtering: bool = True
    similarity_threshold: float = Field(0.7, ge=0.0, le=1.0)
    max_similar_insights: int = Field(1, ge=1)

    enable_category_balancing: bool = True
    category_limits: Dict[InsightCategory, Optional[int]] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_LIMITS)
    )
    category_minimums: Dict[InsightCategory, int] = Field(default_factory=dict)

    enable_type_balancing: bool = True
    type_limits: Dict[InsightType, Optional[int]] = Field(
        default_factory=lambda: dict(DEFAULT_TYPE_LIMITS)
    )
    type_minimums: Dict[InsightType, int] = Field(default_factory=dict)

    enable_temporal_scoring: bool = True
    recency_decay_factor: float = Field(0.1, ge=0.0)
    temporal_window_days: float = Field(90, gt=0)

    min_actionability_score: float = Field(0.2, ge=0.0, le=1.0)
    min_novelty_score: float = Field(0.1, ge=0.0, le=1.0)
    require_evidence: bool = False
    min_evidence_count: int = Field(1, ge=0)

    enable_diversity_boost: bool = True
    diversity_weight: float = Field(0.1, ge=0.0)
    enable_contextual_relevance: bool = True
    context_weight: float = Field(0.15, ge=0.0)

    @field_validator("category_limits", mode="before")
    @classmethod
    def _merge_category_limits(cls, value: Any) -> Dict[str, Optional[int]]:
        return _merge_limits(DEFAULT_CATEGORY_LIMITS, value)

    @field_validator("type_limits", mode="before")
    @classmethod
    def _merge_type_limits(cls, value: Any) -> Dict[str, Optional[int]]:
        return _merge_limits(DEFAULT_TYPE_LIMITS, value)

    @field_validator("category_limits", "type_limits", "category_minimums", "type_minimums")
    @classmethod
    def _non_negative_counts(cls, value: Dict[Any, Optional[int]]) -> Dict[Any, Optional[int]]:
        for key, count in value.items():
            if count is not None and count < 0:
                raise ValueError(f"limit for {getattr(key, 'value', key)} must be >= 0")
        return value

    @model_validator(mode="after")
    def _minimums_within_limits(self) -> "PrioritizationConfig":
        for minimums, limits, label in (
            (self.category_minimums, self.category_limits, "category"),
            (self.type_minimums, self.type_limits, "type"),
        ):
            for key, minimum in minimums.items():
                limit = limits.get(key)
                if limit is not None and minimum > limit:
                    raise ValueError(
                        f"{label} minimum for {key.value} ({minimum}) exceeds its limit ({limit})"
                    )
        return self


class UserRecommendationPreferences(BaseModel):
    """How the user likes recommendations phrased and scoped."""

    preferred_directness: Directness = Directness.RECOMMENDATION
    preferred_timeframes: List[Timeframe] = Field(
        default_factory=lambda: [Timeframe.SHORT_TERM, Timeframe.MEDIUM_TERM]
    )
    preferred_types: List[RecommendationType] = Field(default_factory=list)
    risk_tolerance: Literal["low", "medium", "high"] = "medium"
    detail_level: Literal["minimal", "standard", "comprehensive"] = "standard"
    include_personal_touch: bool = True


class ContextualFactors(BaseModel):
    """Life circumstances used to frame opportunities and assess feasibility."""

    current_life_phase: Literal[
        "student", "early-career", "mid-career", "senior", "retired", "transition"
    ] = "mid-career"
    available_time: Literal["limited", "moderate", "flexible"] = "moderate"
    current_stress_level: Literal["low", "medium", "high"] = "medium"
    major_life_events: List[str] = Field(default_factory=list)
    seasonal_factors: List[str] = Field(default_factory=list)
    work_context: Literal["remote", "office", "hybrid", "freelance", "unemployed"] = "hybrid"


class RecommendationGenerationConfig(BaseModel):
    """Configuration for :class:`RecommendationGenerator`."""

    strategy: Literal["conservative", "balanced", "aggressive"] = "balanced"
    enable_ai_generation: bool = True
    fallback_to_templates: bool = True

    max_recommendations: int = Field(10, ge=1)
    min_confidence_threshold: float = Field(0.3, ge=0.0, le=1.0)
    include_risk_assessment: bool = True
    include_action_steps: bool = True
    include_alternatives: bool = True

    exclude_types: List[RecommendationType] = Field(default_factory=list)
    prioritize_urgency: bool = True
    balance_by_category: bool = True

    user_preferences: UserRecommendationPreferences = Field(
        default_factory=UserRecommendationPreferences
    )
    contextual_factors: ContextualFactors = Field(default_factory=ContextualFactors)

    enable_duplicate_detection: bool = True
    enable_feasibility_check: bool = True
    enable_impact_assessment: bool = True

    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(500, ge=1)
    max_concurrent_completions: int = Field(4, ge=1)
    completion_timeout_seconds: Optional[float] = Field(None, gt=0)
    deadline_seconds: Optional[float] = Field(None, gt=0)


class Settings(BaseModel):
    """Root configuration state persisted to disk."""

    prioritization: PrioritizationConfig = Field(default_factory=PrioritizationConfig)
    generation: RecommendationGenerationConfig = Field(
        default_factory=RecommendationGenerationConfig
    )


def build_prioritization_config(
    base: PrioritizationConfig | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> PrioritizationConfig:
    """Merge overrides onto ``base`` (or defaults) and validate the result."""
    payload = base.model_dump() if base is not None else {}
    payload.update(overrides or {})
    try:
        return PrioritizationConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid prioritization configuration: {exc}",
            details={"fields": sorted(str(err["loc"][0]) for err in exc.errors() if err["loc"])},
        ) from exc


def build_generation_config(
    base: RecommendationGenerationConfig | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> RecommendationGenerationConfig:
    """Merge overrides onto ``base`` (or defaults) and validate the result."""
    payload = base.model_dump() if base is not None else {}
    payload.update(overrides or {})
    try:
        return RecommendationGenerationConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid recommendation configuration: {exc}",
            details={"fields": sorted(str(err["loc"][0]) for err in exc.errors() if err["loc"])},
        ) from exc


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if invalid."""

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found at {path}")
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"Settings file is not valid JSON: {exc}") from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create or load settings respecting environment overrides.

    Missing files are created with defaults. ``overrides`` is keyed by
    section (``prioritization`` / ``generation``) and merged shallowly.
    """

    if path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()
        save_settings(settings, path)

    merged = settings.model_dump(mode="json")
    merged = _apply_overrides(merged, overrides or {})
    merged = _apply_env_overrides(merged)

    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration overrides: {exc}") from exc


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    prioritization = data.setdefault("prioritization", {})
    _set_env_override(prioritization, "max_insights", "INSIGHTFLOW_MAX_INSIGHTS", cast=int)
    _set_env_override(
        prioritization, "min_confidence_threshold", "INSIGHTFLOW_MIN_CONFIDENCE", cast=float
    )

    generation = data.setdefault("generation", {})
    _set_env_override(
        generation, "max_recommendations", "INSIGHTFLOW_MAX_RECOMMENDATIONS", cast=int
    )
    _set_env_override(generation, "enable_ai_generation", "INSIGHTFLOW_ENABLE_AI", cast_bool=True)
    _set_env_override(
        generation,
        "max_concurrent_completions",
        "INSIGHTFLOW_MAX_CONCURRENT_COMPLETIONS",
        cast=int,
    )
    _set_env_override(generation, "deadline_seconds", "INSIGHTFLOW_DEADLINE_SECONDS", cast=float)
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast: Any = None,
    cast_bool: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_bool:
        mapping[key] = raw.lower() in {"1", "true", "yes"}
        return
    try:
        mapping[key] = cast(raw) if cast is not None else raw
    except ValueError as exc:
        raise InvalidConfigError(f"{env_name} has an invalid value: {raw!r}") from exc
