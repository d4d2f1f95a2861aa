"""Tests for insightflow configuration settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from insightflow.configuration.settings import (
    PrioritizationConfig,
    PriorityWeighting,
    RecommendationGenerationConfig,
    Settings,
    bootstrap_settings,
    build_generation_config,
    build_prioritization_config,
    load_settings,
    save_settings,
)
from insightflow.errors import ConfigurationError, InvalidConfigError
from insightflow.models.enums import InsightCategory, InsightType


def test_bootstrap_creates_default_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    settings = bootstrap_settings(path=config_path)

    assert config_path.exists()
    data = json.loads(config_path.read_text())
    assert data["prioritization"]["max_insights"] == 20
    assert data["generation"]["max_recommendations"] == 10
    assert settings.prioritization.weights.confidence == 0.25


def test_load_settings_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    settings = Settings.model_validate(
        {
            "prioritization": {"max_insights": 7, "category_limits": {"productivity": None}},
            "generation": {"max_recommendations": 4, "exclude_types": ["decision"]},
        }
    )
    save_settings(settings, config_path)

    loaded = load_settings(config_path)
    assert loaded.prioritization.max_insights == 7
    assert loaded.prioritization.category_limits[InsightCategory.PRODUCTIVITY] is None
    assert loaded.generation.max_recommendations == 4


def test_load_settings_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")


def test_load_settings_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    with pytest.raises(InvalidConfigError):
        load_settings(config_path)


def test_bootstrap_applies_section_overrides(tmp_path: Path) -> None:
    settings = bootstrap_settings(
        path=tmp_path / "config.json",
        overrides={"prioritization": {"max_insights": 5}},
    )

    assert settings.prioritization.max_insights == 5
    assert settings.prioritization.min_confidence_threshold == 0.3


def test_bootstrap_applies_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSIGHTFLOW_MAX_INSIGHTS", "12")
    monkeypatch.setenv("INSIGHTFLOW_ENABLE_AI", "false")
    monkeypatch.setenv("INSIGHTFLOW_DEADLINE_SECONDS", "2.5")

    settings = bootstrap_settings(path=tmp_path / "config.json")

    assert settings.prioritization.max_insights == 12
    assert settings.generation.enable_ai_generation is False
    assert settings.generation.deadline_seconds == 2.5


def test_bootstrap_rejects_bad_env_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSIGHTFLOW_MAX_INSIGHTS", "lots")

    with pytest.raises(InvalidConfigError):
        bootstrap_settings(path=tmp_path / "config.json")


class TestPrioritizationConfig:
    def test_defaults(self) -> None:
        """Defaults carry every category and type limit."""
        config = PrioritizationConfig()

        assert config.max_insights == 20
        assert config.max_similar_insights == 1
        assert set(config.category_limits) == set(InsightCategory)
        assert set(config.type_limits) == set(InsightType)
        assert config.type_limits[InsightType.ANOMALY] == 1

    def test_partial_limits_merge_onto_defaults(self) -> None:
        """Overriding one limit keeps the others."""
        config = PrioritizationConfig(category_limits={"productivity": 1})

        assert config.category_limits[InsightCategory.PRODUCTIVITY] == 1
        assert config.category_limits[InsightCategory.WELLBEING] == 3

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError):
            PriorityWeighting(recency=-0.1)

    def test_all_zero_weights_rejected(self) -> None:
        with pytest.raises(ValueError):
            PriorityWeighting(
                recency=0, frequency=0, confidence=0, impact=0, novelty=0, actionability=0
            )

    def test_minimum_above_limit_rejected(self) -> None:
        with pytest.raises(ValueError):
            PrioritizationConfig(
                category_limits={"trends": 1}, category_minimums={"trends": 2}
            )

    def test_build_wraps_validation_error(self) -> None:
        """Builders report invalid overrides as ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_prioritization_config(overrides={"max_insights": 0})

        assert "max_insights" in exc_info.value.details["fields"]

    @pytest.mark.parametrize("limits", [[1, 2], "abc", 5])
    def test_non_mapping_limits_rejected(self, limits) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_prioritization_config(overrides={"category_limits": limits})

        assert "category_limits" in exc_info.value.details["fields"]

    def test_non_mapping_limits_in_settings_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"prioritization": {"type_limits": ["pattern"]}}))

        with pytest.raises(InvalidConfigError):
            load_settings(path)

    def test_build_merges_onto_base(self) -> None:
        base = PrioritizationConfig(max_insights=3)
        config = build_prioritization_config(base, {"similarity_threshold": 0.5})

        assert config.max_insights == 3
        assert config.similarity_threshold == 0.5


class TestGenerationConfig:
    def test_defaults(self) -> None:
        config = RecommendationGenerationConfig()

        assert config.enable_ai_generation is True
        assert config.fallback_to_templates is True
        assert config.max_concurrent_completions == 4
        assert config.deadline_seconds is None

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            build_generation_config(overrides={"max_recommendations": -1})

    def test_unknown_excluded_type_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            build_generation_config(overrides={"exclude_types": ["nonsense"]})
