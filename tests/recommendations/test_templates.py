"""Tests for template rendering and the template registry."""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType

import pytest

from insightflow.errors import TemplateError
from insightflow.models.enums import InsightCategory, RecommendationType
from insightflow.models.recommendation import RecommendationTemplate, TemplateVariation
from insightflow.recommendations.templates import (
    BASIC_ACTION_TEMPLATE,
    TemplateRegistry,
    fill_template,
    find_placeholders,
    validate_template,
)


def habit_template(**changes) -> RecommendationTemplate:
    template = RecommendationTemplate(
        id="habit-basic",
        name="Basic Habit",
        type=RecommendationType.HABIT,
        category=InsightCategory.HABITS,
        title_template="Build a {{habit_type}} habit",
        description_template="Doing {{habit_type}} regularly helps.",
        action_steps_template=["Pick a time", "Track {{habit_type}}"],
        variables=["habit_type"],
        effectiveness=0.6,
    )
    return replace(template, **changes)


class TestRendering:
    def test_fill_known_variables(self) -> None:
        text = fill_template("Take action on {{ insight_topic }}", {"insight_topic": "email"})
        assert text == "Take action on email"

    def test_unknown_placeholder_left_intact(self) -> None:
        assert fill_template("Hello {{who}}", {}) == "Hello {{who}}"

    def test_find_placeholders(self) -> None:
        assert find_placeholders("{{a}} and {{ b }}") == ["a", "b"]


class TestValidation:
    def test_default_template_is_valid(self) -> None:
        validate_template(BASIC_ACTION_TEMPLATE)

    def test_empty_title_rejected(self) -> None:
        with pytest.raises(TemplateError):
            validate_template(habit_template(title_template="  "))

    def test_effectiveness_out_of_range(self) -> None:
        with pytest.raises(TemplateError):
            validate_template(habit_template(effectiveness=1.5))

    def test_undeclared_placeholder_rejected(self) -> None:
        with pytest.raises(TemplateError) as exc_info:
            validate_template(habit_template(title_template="Build {{mystery}}"))

        assert "mystery" in str(exc_info.value)

    def test_variation_placeholders_checked(self) -> None:
        template = habit_template(
            variations=[TemplateVariation(condition="high_stress", title_variation="Rest {{x}}")]
        )
        with pytest.raises(TemplateError):
            validate_template(template)


class TestRegistry:
    def test_defaults_loaded(self) -> None:
        registry = TemplateRegistry()

        assert "basic-action" in registry
        assert len(registry) == 1

    def test_empty_registry(self) -> None:
        registry = TemplateRegistry(load_defaults=False)

        assert len(registry) == 0
        assert registry.find_best(RecommendationType.ACTION) is None

    def test_register_and_get(self) -> None:
        registry = TemplateRegistry()
        registry.register(habit_template())

        assert registry.get("habit-basic").name == "Basic Habit"
        assert registry.find_best(RecommendationType.HABIT).id == "habit-basic"
        assert [t.id for t in registry.templates()] == ["basic-action", "habit-basic"]

    def test_register_invalid_leaves_registry_unchanged(self) -> None:
        registry = TemplateRegistry()
        with pytest.raises(TemplateError):
            registry.register_many([habit_template(), habit_template(id="bad", description_template="")])

        assert "habit-basic" not in registry

    def test_find_best_prefers_effectiveness(self) -> None:
        registry = TemplateRegistry(load_defaults=False)
        registry.register_many(
            [
                habit_template(id="low", effectiveness=0.4),
                habit_template(id="high", effectiveness=0.9),
                habit_template(id="also-high", effectiveness=0.9),
            ]
        )

        assert registry.find_best(RecommendationType.HABIT).id == "high"

    def test_update_requires_existing(self) -> None:
        registry = TemplateRegistry(load_defaults=False)
        with pytest.raises(TemplateError):
            registry.update(habit_template())

        registry.register(habit_template())
        registry.update(habit_template(name="Renamed"))
        assert registry.get("habit-basic").name == "Renamed"

    def test_remove(self) -> None:
        registry = TemplateRegistry()

        assert registry.remove("basic-action") is True
        assert registry.remove("basic-action") is False
        assert registry.templates() == []

    def test_snapshot_is_stable(self) -> None:
        """A snapshot taken before a write does not see the write."""
        registry = TemplateRegistry()
        snapshot = registry.snapshot()
        registry.register(habit_template())

        assert isinstance(snapshot, MappingProxyType)
        assert "habit-basic" not in snapshot
        assert "habit-basic" in registry.snapshot()

    def test_registries_are_independent(self) -> None:
        first = TemplateRegistry()
        second = TemplateRegistry()
        first.register(habit_template())

        assert "habit-basic" not in second

    def test_clear_and_reload(self) -> None:
        registry = TemplateRegistry()
        registry.clear()
        assert len(registry) == 0

        registry.load_defaults()
        assert "basic-action" in registry


def test_template_to_dict() -> None:
    data = habit_template(
        variations=[TemplateVariation(condition="high_stress", title_variation="Rest with {{habit_type}}")]
    ).to_dict()

    assert data["type"] == "habit"
    assert data["variations"][0]["condition"] == "high_stress"
    assert data["variations"][0]["directness_adjustment"] is None
