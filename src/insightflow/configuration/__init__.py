"""Configuration loading utilities for insightflow."""

from .settings import (
    DEFAULT_CATEGORY_LIMITS,
    DEFAULT_CONFIG_PATH,
    DEFAULT_TYPE_LIMITS,
    ContextualFactors,
    PrioritizationConfig,
    PriorityWeighting,
    RecommendationGenerationConfig,
    Settings,
    UserRecommendationPreferences,
    bootstrap_settings,
    build_generation_config,
    build_prioritization_config,
    load_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CATEGORY_LIMITS",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_TYPE_LIMITS",
    "ContextualFactors",
    "PrioritizationConfig",
    "PriorityWeighting",
    "RecommendationGenerationConfig",
    "Settings",
    "UserRecommendationPreferences",
    "bootstrap_settings",
    "build_generation_config",
    "build_prioritization_config",
    "load_settings",
    "save_settings",
]
