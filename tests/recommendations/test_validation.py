"""Tests for recommendation validation."""

from __future__ import annotations

import pytest

from insightflow.errors import ValidationError
from insightflow.models.enums import IssueSeverity, IssueType
from insightflow.recommendations.validation import RecommendationValidator


@pytest.fixture
def validator() -> RecommendationValidator:
    return RecommendationValidator()


def test_complete_recommendation_is_valid(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation())

    assert result.is_valid
    assert result.issues == []
    assert result.confidence == 1.0


def test_missing_title_is_invalid(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation(title="   "))

    assert not result.is_valid
    assert result.issues[0].field == "title"
    assert result.issues[0].severity == IssueSeverity.HIGH
    assert result.suggestions[0] == "Add title to complete the recommendation"


def test_missing_sources_is_invalid(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation(sources=[]))

    assert not result.is_valid
    assert [issue.field for issue in result.issues] == ["source_insights"]


def test_out_of_range_confidence_is_medium(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation(confidence=1.4))

    assert result.is_valid
    assert result.issues[0].type == IssueType.INVALID_VALUE
    assert result.confidence == pytest.approx(0.9)


def test_missing_steps_is_quality_concern(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation(steps=0))

    assert result.is_valid
    assert result.issues[0].type == IssueType.QUALITY_CONCERN
    assert result.suggestions == ["Improve action_steps to enhance recommendation quality"]


def test_leftover_placeholders_flagged(validator, make_recommendation) -> None:
    result = validator.validate(make_recommendation(title="Try {{habit_type}}"))

    assert result.is_valid
    assert result.issues[0].severity == IssueSeverity.LOW
    assert "habit_type" in result.issues[0].message


def test_confidence_drops_per_issue(validator, make_recommendation) -> None:
    rec = make_recommendation(title="", sources=[], confidence=-1, steps=0)

    result = validator.validate(rec)

    assert len(result.issues) == 4
    assert result.confidence == pytest.approx(0.6)


def test_ensure_valid_raises_for_high_severity(validator, make_recommendation) -> None:
    rec = make_recommendation(sources=[])

    with pytest.raises(ValidationError) as exc_info:
        validator.ensure_valid(rec)

    assert exc_info.value.details["recommendation_id"] == rec.id
    assert exc_info.value.details["fields"] == ["source_insights"]


def test_ensure_valid_returns_result_for_minor_issues(validator, make_recommendation) -> None:
    result = validator.ensure_valid(make_recommendation(steps=0))

    assert result.is_valid
    assert len(result.issues) == 1
