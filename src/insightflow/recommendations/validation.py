"""Structural and quality checks for generated recommendations."""

from __future__ import annotations

import logging
from typing import Dict, List

from insightflow.errors import ValidationError
from insightflow.models.enums import IssueSeverity, IssueType
from insightflow.models.recommendation import (
    GeneratedRecommendation,
    ValidationIssue,
    ValidationResult,
)
from insightflow.recommendations.templates import find_placeholders

logger = logging.getLogger(__name__)

ISSUE_PENALTY = 0.1

SUGGESTION_TEMPLATES: Dict[IssueType, str] = {
    IssueType.MISSING_FIELD: "Add {field} to complete the recommendation",
    IssueType.INVALID_VALUE: "Correct the {field} value to be within valid range",
    IssueType.QUALITY_CONCERN: "Improve {field} to enhance recommendation quality",
}


class RecommendationValidator:
    """Checks a recommendation and reports issues by severity.

    A recommendation is valid when it has no high-severity issue. The
    validation confidence drops by 0.1 per issue of any severity.
    """

    def validate(self, recommendation: GeneratedRecommendation) -> ValidationResult:
        issues: List[ValidationIssue] = []

        if not (recommendation.title or "").strip():
            issues.append(self._issue(
                IssueType.MISSING_FIELD, "title",
                "Recommendation title is required", IssueSeverity.HIGH,
            ))
        if not (recommendation.description or "").strip():
            issues.append(self._issue(
                IssueType.MISSING_FIELD, "description",
                "Recommendation description is required", IssueSeverity.HIGH,
            ))
        if not recommendation.source_insights:
            issues.append(self._issue(
                IssueType.MISSING_FIELD, "source_insights",
                "Recommendation must reference at least one source insight", IssueSeverity.HIGH,
            ))
        if not 0.0 <= recommendation.confidence <= 1.0:
            issues.append(self._issue(
                IssueType.INVALID_VALUE, "confidence",
                "Confidence must be between 0 and 1", IssueSeverity.MEDIUM,
            ))
        if not recommendation.action_steps:
            issues.append(self._issue(
                IssueType.QUALITY_CONCERN, "action_steps",
                "Recommendation should include specific action steps", IssueSeverity.MEDIUM,
            ))
        for field_name in ("title", "description"):
            leftovers = find_placeholders(getattr(recommendation, field_name) or "")
            if leftovers:
                issues.append(self._issue(
                    IssueType.QUALITY_CONCERN, field_name,
                    f"Unresolved template placeholders: {', '.join(sorted(set(leftovers)))}",
                    IssueSeverity.LOW,
                ))

        is_valid = not any(issue.severity == IssueSeverity.HIGH for issue in issues)
        if not is_valid:
            logger.debug(f"Recommendation {recommendation.id} failed validation: {len(issues)} issues")

        return ValidationResult(
            is_valid=is_valid,
            issues=issues,
            suggestions=[self._suggestion(issue) for issue in issues],
            confidence=max(0.0, 1.0 - ISSUE_PENALTY * len(issues)),
        )

    def ensure_valid(self, recommendation: GeneratedRecommendation) -> ValidationResult:
        """Validate and raise ValidationError when a high-severity issue is found."""
        result = self.validate(recommendation)
        if not result.is_valid:
            problems = "; ".join(
                issue.message for issue in result.issues if issue.severity == IssueSeverity.HIGH
            )
            raise ValidationError(
                f"Recommendation {recommendation.id} is invalid: {problems}",
                details={
                    "recommendation_id": recommendation.id,
                    "fields": [issue.field for issue in result.issues],
                    "problems": problems,
                },
            )
        return result

    @staticmethod
    def _issue(
        issue_type: IssueType, field: str, message: str, severity: IssueSeverity
    ) -> ValidationIssue:
        return ValidationIssue(type=issue_type, field=field, message=message, severity=severity)

    @staticmethod
    def _suggestion(issue: ValidationIssue) -> str:
        template = SUGGESTION_TEMPLATES.get(issue.type, "Address {field} issue")
        return template.format(field=issue.field)
